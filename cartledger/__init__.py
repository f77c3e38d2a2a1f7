# cartledger - personal expense ledger and shopping cart price tracker
