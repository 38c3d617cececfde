import contextlib
import functools
import json
import logging
from typing import Any, AsyncIterator, Awaitable, Callable

from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.middleware.cors import CORSMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route

from app import config
from domain.errors import GenerationError, ValidationError
from domain.llm_service import OpenAIGenerationClient
from domain.models import FoodInput, RestaurantInput
from domain.services import create_menu, create_recipe


logger = logging.getLogger(__name__)


CONFIG = config.Config()


SERVICE = "Kitchen Flows API"
VERSION = "1.0.0"


class InvalidBody(Exception):
    pass


def aJSONResponse(route: Callable[..., Awaitable[Any]]):
    """Render what the route returns as JSON and failures as an error body."""

    @functools.wraps(route)
    async def wrapper(request: Request) -> JSONResponse:
        try:
            resp = await route(request)
        except InvalidBody as e:
            return JSONResponse(
                {"error": "Invalid JSON", "message": str(e)}, status_code=400
            )
        except GenerationError as e:
            if e.status_code >= 500:
                logger.error("%s %s failed: %s", request.method, request.url.path, e)
            return JSONResponse(e.to_dict(), status_code=e.status_code)
        except Exception:
            logger.exception("%s %s crashed", request.method, request.url.path)
            return JSONResponse(
                {"error": "Internal Server Error", "message": "Unexpected server error"},
                status_code=500,
            )
        if not isinstance(resp, tuple):
            body, code = resp, 200
        else:
            body, code = resp
        return JSONResponse(body, status_code=code)

    return wrapper


async def json_body(request: Request) -> dict[str, Any]:
    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise InvalidBody("Please provide valid JSON input") from e
    if not isinstance(body, dict):
        raise InvalidBody("Please provide a JSON object")
    return body


@aJSONResponse
async def recipe(request: Request) -> dict[str, Any]:
    food = FoodInput.from_dict(await json_body(request))
    logger.info("Recipe requested: %s", food.food_name)
    return await create_recipe(
        food,
        client=request.app.state.client,
        timeout=CONFIG.request_timeout,
    )


@aJSONResponse
async def menu(request: Request) -> dict[str, Any]:
    body = await json_body(request)
    restaurant = RestaurantInput.from_dict(body)
    with_image = body.get("withImage")
    if with_image is None:
        with_image = False
    if not isinstance(with_image, bool):
        raise ValidationError("withImage", "should be a boolean")
    logger.info("Menu requested: %s (image=%s)", restaurant.name, with_image)
    card = await create_menu(
        restaurant,
        client=request.app.state.client,
        with_image=with_image,
        output_dir=request.app.state.output_dir,
        timeout=CONFIG.request_timeout,
    )
    return card.to_dict()


@aJSONResponse
async def health(request: Request) -> dict[str, Any]:
    return {"status": "healthy", "service": SERVICE}


@aJSONResponse
async def docs(request: Request) -> dict[str, Any]:
    return {
        "service": SERVICE,
        "version": VERSION,
        "endpoints": {
            "POST /api/recipe": {
                "description": "Generate a recipe for a given food name",
                "input": {
                    "foodName": "Name of the food (required)",
                    "dietaryRestrictions": "Optional dietary restrictions",
                    "difficulty": "Optional difficulty level (easy, medium, hard)",
                    "servingSize": "Optional number of servings",
                },
            },
            "POST /api/menu": {
                "description": "Generate a themed restaurant menu",
                "input": {
                    "name": "Name of the restaurant (required)",
                    "theme": "Theme or concept (required)",
                    "cuisineType": "Type of cuisine (required)",
                    "priceRange": "budget, mid-range, upscale or fine-dining (required)",
                    "atmosphere": "Atmosphere or vibe (required)",
                    "specialFeature": "Optional special feature or gimmick",
                    "withImage": "Optional, also design and draw a menu card",
                },
            },
            "GET /health": "Health check endpoint",
        },
        "example_request": {
            "foodName": "Chicken Tikka Masala",
            "dietaryRestrictions": "gluten-free",
            "difficulty": "medium",
            "servingSize": 6,
        },
    }


@contextlib.asynccontextmanager
async def lifespan(app: Starlette) -> AsyncIterator[None]:
    yield
    close = getattr(app.state.client, "close", None)
    if close is not None:
        await close()


app = Starlette(
    debug=True if CONFIG.env == config.Env.local else False,
    routes=[
        Route("/", docs, methods=["GET"]),
        Route("/health", health, methods=["GET"]),
        Route("/api/recipe", recipe, methods=["POST"]),
        Route("/api/menu", menu, methods=["POST"]),
    ],
    middleware=[
        Middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_methods=["GET", "POST", "OPTIONS"],
            allow_headers=["Content-Type"],
        )
    ],
    lifespan=lifespan,
)

app.state.client = OpenAIGenerationClient(
    token=CONFIG.token,
    model=CONFIG.text_model,
    image_model=CONFIG.image_model,
    temperature=CONFIG.temperature,
)
app.state.output_dir = CONFIG.output_dir
