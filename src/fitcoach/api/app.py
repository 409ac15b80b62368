"""FastAPI application factory."""

from fastapi import FastAPI, Request

from fitcoach.api.clients import router as clients_router
from fitcoach.app_logging import configure_logging
from fitcoach.containers import AppContainer


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()

    app = FastAPI(title="fitcoach")
    app.state.container = container

    app.include_router(clients_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/foods")
    async def list_foods(
        request: Request, query: str | None = None, limit: int = 200
    ) -> dict[str, object]:
        """Return food reference data."""
        state_container: AppContainer = request.app.state.container
        foods = state_container.food_library_service.list_foods(query, limit)
        return {
            "foods": [
                {
                    "id": str(food.id),
                    "name": food.name,
                    "brand": food.brand,
                    "category": food.category,
                    "serving_size": food.serving_size,
                    "serving_unit": food.serving_unit,
                    "calories": food.calories,
                    "protein_g": food.protein_g,
                    "carbs_g": food.carbs_g,
                    "fat_g": food.fat_g,
                    "fiber_g": food.fiber_g,
                }
                for food in foods
            ]
        }

    return app
