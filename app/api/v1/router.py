# app/api/v1/router.py
from fastapi import APIRouter

from app.config.settings import settings
from app.modules.sales import sales_router

# Main API v1 router
api_router = APIRouter()

# ==================== MODULE ROUTES ====================

api_router.include_router(sales_router)

# ==================== ROOT ENDPOINTS ====================

@api_router.get("/")
async def api_root():
    """Root endpoint of the API"""
    return {
        "message": f"{settings.app_name} v1",
        "version": settings.version,
        "status": "active",
        "available_endpoints": {
            "sales": "/api/v1/sales"
        }
    }

@api_router.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "service": settings.app_name,
        "version": settings.version,
        "modules": {
            "sales": {
                "status": "active",
                "endpoints": ["POST /sales", "GET /sales"]
            }
        }
    }
