from pathlib import Path
from typing import Any

from data import save_image
from domain import schemas
from domain.errors import GenerationError
from domain.models import FoodInput, MenuCard, RestaurantInput
from domain.pipeline import GenerationClient, Pipeline, PipelineContext, Stage, Step
from domain.prompts import (
    menu_design_request,
    menu_image_request,
    menu_request,
    recipe_request,
)


def fill_recipe_defaults(food: FoodInput, recipe: dict[str, Any]) -> dict[str, Any]:
    """The model sometimes leaves out the name or servings; take them from the ask."""
    if not recipe.get("name"):
        recipe["name"] = food.food_name
    if not recipe.get("servings"):
        recipe["servings"] = food.serving_size
    return recipe


RECIPE_STEP: Step[FoodInput] = Step(
    "recipe",
    recipe_request,
    schemas.RECIPE,
    normalize=fill_recipe_defaults,
)


MENU_STEP: Step[RestaurantInput] = Step("menu", menu_request, schemas.MENU)


MENU_DESIGN_STEP: Step[tuple[RestaurantInput, dict[str, Any]]] = Step(
    "design", menu_design_request, schemas.MENU_DESIGN
)


MENU_IMAGE_STEP: Step[tuple[dict[str, Any], dict[str, Any]]] = Step(
    "image", menu_image_request, schemas.MENU_IMAGE
)


def restaurant_input(ctx: PipelineContext) -> RestaurantInput:
    return ctx.initial


def design_input(ctx: PipelineContext) -> tuple[RestaurantInput, dict[str, Any]]:
    return ctx.initial, ctx["menu"]


def image_input(ctx: PipelineContext) -> tuple[dict[str, Any], dict[str, Any]]:
    return ctx["menu"], ctx["design"]


def recipe_pipeline(client: GenerationClient) -> Pipeline:
    return Pipeline([Stage("recipe", RECIPE_STEP)], client)


def menu_pipeline(client: GenerationClient, *, with_image: bool = False) -> Pipeline:
    stages = [Stage("menu", MENU_STEP, restaurant_input)]
    if with_image:
        stages += [
            Stage("design", MENU_DESIGN_STEP, design_input),
            Stage("image", MENU_IMAGE_STEP, image_input),
        ]
    return Pipeline(stages, client)


async def create_recipe(
    food: FoodInput,
    *,
    client: GenerationClient,
    timeout: float | None = None,
) -> dict[str, Any]:
    result = await recipe_pipeline(client).run(food, timeout=timeout)
    return result.unwrap()


async def create_menu(
    restaurant: RestaurantInput,
    *,
    client: GenerationClient,
    with_image: bool = False,
    output_dir: Path | None = None,
    timeout: float | None = None,
) -> MenuCard:
    result = await menu_pipeline(client, with_image=with_image).run(
        restaurant, timeout=timeout
    )
    result.unwrap()
    menu = result.outputs["menu"]
    if not with_image:
        return MenuCard(menu=menu)

    image = result.outputs["image"]
    try:
        path = await save_image(
            image["imageBase64"],
            subject=menu["restaurantName"] or restaurant.name,
            output_dir=Path("output") if output_dir is None else output_dir,
            mime_type=image["mimeType"],
        )
    except (OSError, ValueError) as e:
        raise GenerationError(f"Could not save menu image: {e}", step="image") from e
    return MenuCard(
        menu=menu,
        design=result.outputs["design"],
        image_path=path,
        mime_type=image["mimeType"],
    )
