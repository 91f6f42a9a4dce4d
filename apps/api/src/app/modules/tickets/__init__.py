"""
Tickets Module

Support tickets raised by students. Each ticket is given a TK- identifier;
Urgent tickets carry a fee.

Endpoints:
- POST /tickets - Raise a ticket
- GET /tickets/mine - The calling student's tickets
- GET /tickets/{ticket_id} - Ticket detail by TK- identifier
- GET /admin/tickets - Admin list
- PATCH /admin/tickets/{id}/status - Admin status transition
"""
