from fastapi import FastAPI

from .controller import router as scheduling_router

app = FastAPI(
    title="crewsched",
    description="Crew assignment suggestions and schedule conflict checks"
)


def register_routes(app: FastAPI):
    app.include_router(scheduling_router)


register_routes(app)
