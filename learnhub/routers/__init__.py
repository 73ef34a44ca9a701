from .admin import router as admin_router
from .auth import router as auth_router
from .categories import router as categories_router
from .contact import router as contact_router
from .courses import router as courses_router
from .reviews import router as reviews_router

all_routers = [
    auth_router,
    categories_router,
    courses_router,
    reviews_router,
    contact_router,
    admin_router,
]
