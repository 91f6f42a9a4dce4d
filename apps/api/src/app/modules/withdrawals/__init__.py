"""
Withdrawals Module

Withdrawal details an agent or student keeps on file: the bank account
payouts go to and the identity documents backing it. One record per user.

Endpoints:
- POST /withdrawals - Save withdrawal details (201 on first save, 200 after)
- GET /withdrawals/mine - The caller's withdrawal details
"""
