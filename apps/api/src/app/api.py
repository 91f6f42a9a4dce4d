from fastapi import APIRouter

from app.modules.agents.admin_router import router as admin_agents_router
from app.modules.agents.router import router as agents_router
from app.modules.applications.admin_router import router as admin_applications_router
from app.modules.applications.router import router as applications_router
from app.modules.auth.router import router as auth_router
from app.modules.documents.router import router as documents_router
from app.modules.students.admin_router import router as admin_students_router
from app.modules.students.router import router as students_router
from app.modules.tickets.admin_router import router as admin_tickets_router
from app.modules.tickets.router import router as tickets_router
from app.modules.withdrawals.router import router as withdrawals_router

api_router = APIRouter()

api_router.include_router(auth_router, prefix="/auth", tags=["Authentication"])

api_router.include_router(
    students_router, prefix="/student-information", tags=["Student Information"]
)
api_router.include_router(applications_router, prefix="/applications", tags=["Applications"])
api_router.include_router(agents_router, prefix="/agents", tags=["Agents"])
api_router.include_router(tickets_router, prefix="/tickets", tags=["Tickets"])
api_router.include_router(withdrawals_router, prefix="/withdrawals", tags=["Withdrawals"])
api_router.include_router(documents_router, prefix="/documents", tags=["Documents"])

api_router.include_router(
    admin_applications_router,
    prefix="/admin/applications",
    tags=["Admin - Applications"],
)
api_router.include_router(
    admin_students_router,
    prefix="/admin/students",
    tags=["Admin - Students"],
)
api_router.include_router(
    admin_agents_router,
    prefix="/admin/agents",
    tags=["Admin - Agents"],
)
api_router.include_router(
    admin_tickets_router,
    prefix="/admin/tickets",
    tags=["Admin - Tickets"],
)
