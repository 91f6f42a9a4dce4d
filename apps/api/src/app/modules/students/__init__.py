"""
Student Information Module

Student profiles filled in by students, or by agents on a student's behalf.

Endpoints:
- POST /student-information - Create a profile
- GET /student-information/mine - The calling student's profile
- GET /student-information - Profiles managed by the calling agent
- GET /student-information/{id} - Profile detail
- PATCH /student-information/{id} - Update profile sections
- GET /admin/students - Admin list
- PATCH /admin/students/{id}/page-status - Admin page status transition
"""
