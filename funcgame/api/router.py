from fastapi import APIRouter

from funcgame.api.routes import core, functions, games, steps, tickets, users

api_router = APIRouter()
api_router.include_router(core.router)
api_router.include_router(users.router)
api_router.include_router(games.router)
api_router.include_router(functions.router)
api_router.include_router(steps.router)
api_router.include_router(tickets.router)
