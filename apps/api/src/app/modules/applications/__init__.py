"""
Applications Module

Institution requests filed for a student: offer letters, GICs and
course-fee payments. Every application is given an AP- identifier.

Endpoints:
- POST /applications/offer-letter - File an offer letter request
- POST /applications/gic - File a GIC request
- POST /applications/course-fee - File a course-fee payment
- GET /applications - The caller's applications
- GET /applications/overview - Dashboard counts
- GET /applications/{id} - Application detail
- GET /admin/applications - Admin list
- GET /admin/applications/stats - Admin dashboard counts
- PATCH /admin/applications/{id}/sections/{section} - Section transition
"""
