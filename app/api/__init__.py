from fastapi import APIRouter
from app.api.routes import cheques, documents

api_router = APIRouter()
api_router.include_router(cheques.router)
api_router.include_router(documents.router)
