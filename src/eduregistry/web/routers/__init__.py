from eduregistry.web.routers.admin import router as admin_router
from eduregistry.web.routers.auth import router as auth_router
from eduregistry.web.routers.countries import router as countries_router
from eduregistry.web.routers.individuals import router as individuals_router
from eduregistry.web.routers.parents import router as parents_router
from eduregistry.web.routers.schools import router as schools_router
from eduregistry.web.routers.students import router as students_router

__all__ = [
    "admin_router",
    "auth_router",
    "countries_router",
    "individuals_router",
    "parents_router",
    "schools_router",
    "students_router",
]
