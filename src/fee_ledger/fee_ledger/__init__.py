"""Fee ledger package.

Keeps one fee record per student (amount owed after scholarship, embedded
payment history, derived settlement status) behind thin Flask controllers and
service/repository layers.
"""
