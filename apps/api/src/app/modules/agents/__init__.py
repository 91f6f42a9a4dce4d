"""
Agents Module

Company registration for agent accounts. Agents fill in their company
profile page by page; submitting it assigns an AG- identifier and puts the
company up for admin review.

Endpoints:
- PUT /agents/company - Save profile pages
- GET /agents/company - The calling agent's company
- POST /agents/company/submit - Submit for review
- GET /admin/agents - Admin list
- PATCH /admin/agents/{id}/page-status - Admin page status transition
"""
