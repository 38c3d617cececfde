"""Console entry point.

    python main.py recipe "Pasta Carbonara" --servings 4
    python main.py menu --image
    python main.py serve
"""

import argparse
import asyncio
import logging
from typing import Any, Sequence

from rich.console import Console
from rich.logging import RichHandler

from app import config
from domain.errors import GenerationError
from domain.llm_service import OpenAIGenerationClient
from domain.models import FoodInput, MenuCard, RestaurantInput
from domain.services import create_menu, create_recipe


CONFIG = config.Config()


console = Console()


COSMIC_CANTINA = {
    "name": "The Cosmic Cantina",
    "theme": "intergalactic space diner with retro-futuristic vibes",
    "cuisineType": "fusion comfort food",
    "priceRange": "mid-range",
    "atmosphere": "quirky and family-friendly with neon lights and space memorabilia",
    "specialFeature": (
        "all dishes are served on LED-lit plates and the waitstaff wear space suits"
    ),
}


MENU_SECTIONS = (
    ("appetizers", "🛸 APPETIZERS"),
    ("mains", "🌟 MAIN COURSES"),
    ("desserts", "🍨 DESSERTS"),
    ("beverages", "🥤 BEVERAGES"),
    ("specialties", "⚡ CHEF'S SPECIALTIES"),
)


def print_recipe(recipe: dict[str, Any]) -> None:
    console.rule(f"[bold]{recipe['name']}")
    console.print(recipe["description"])
    console.print(
        f"\n🍴 Serves: {recipe['servings']}   ⏰ Prep: {recipe['prepTime']}   "
        f"Cook: {recipe['cookTime']}   Total: {recipe['totalTime']}   "
        f"Difficulty: {recipe['difficulty']}"
    )
    console.print("\n[bold]📝 Ingredients")
    for ingredient in recipe["ingredients"]:
        console.print(f"• {ingredient}")
    console.print("\n[bold]✅ Instructions")
    for i, step in enumerate(recipe["instructions"], start=1):
        console.print(f"{i}. {step}")
    if recipe.get("tips"):
        console.print("\n[bold]💡 Tips")
        for tip in recipe["tips"]:
            console.print(f"• {tip}")
    if recipe.get("nutrition"):
        console.print(f"\n[bold]Nutrition:[/bold] {recipe['nutrition']}")


def print_menu(card: MenuCard) -> None:
    menu = card.menu
    console.print(f"🚀 Welcome to [bold]{menu['restaurantName']}[/bold] 🚀")
    console.print(f"Tagline: {menu['tagline']}")
    console.print(f"\n🌌 AMBIANCE: {menu['ambiance']}")
    console.print(f"\n⭐ FUN FACT: {menu['funFact']}")
    for key, title in MENU_SECTIONS:
        items = menu.get(key) or []
        if not items:
            continue
        console.print(f"\n[bold]{title}:")
        for item in items:
            console.print(f"• {item['name']} - {item['price']}\n  {item['description']}")
    if card.image_path is not None:
        console.print(f"\n🖼  Menu card saved to {card.image_path}")


def client_from_config() -> OpenAIGenerationClient:
    return OpenAIGenerationClient(
        token=CONFIG.token,
        model=CONFIG.text_model,
        image_model=CONFIG.image_model,
        temperature=CONFIG.temperature,
    )


async def run_recipe(args: argparse.Namespace) -> None:
    food = FoodInput.from_dict(
        {
            "foodName": args.food,
            "dietaryRestrictions": args.diet,
            "difficulty": args.difficulty,
            "servingSize": args.servings,
        }
    )
    client = client_from_config()
    try:
        with console.status(f"Cooking up {food.food_name} ..."):
            recipe = await create_recipe(food, client=client, timeout=args.timeout)
    finally:
        await client.close()
    print_recipe(recipe)


async def run_menu(args: argparse.Namespace) -> None:
    restaurant = RestaurantInput.from_dict(COSMIC_CANTINA)
    client = client_from_config()
    try:
        with console.status(f"Writing the menu for {restaurant.name} ..."):
            card = await create_menu(
                restaurant,
                client=client,
                with_image=args.image,
                output_dir=CONFIG.output_dir,
                timeout=args.timeout,
            )
    finally:
        await client.close()
    print_menu(card)


def serve(args: argparse.Namespace) -> None:
    import uvicorn

    uvicorn.run("app.app:app", host=args.host, port=args.port)


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Recipes and menus from an LLM.")
    parser.add_argument("-v", "--verbose", action="store_true")
    sub = parser.add_subparsers(dest="command", required=True)

    recipe = sub.add_parser("recipe", help="Generate a recipe")
    recipe.add_argument("food")
    recipe.add_argument("--diet", default="")
    recipe.add_argument("--difficulty", default="")
    recipe.add_argument("--servings", type=int, default=0)
    recipe.add_argument("--timeout", type=float, default=CONFIG.request_timeout)

    menu = sub.add_parser("menu", help="Generate the Cosmic Cantina menu")
    menu.add_argument("--image", action="store_true", help="Also draw a menu card")
    menu.add_argument("--timeout", type=float, default=CONFIG.request_timeout)

    server = sub.add_parser("serve", help="Run the HTTP API")
    server.add_argument("--host", default=CONFIG.host)
    server.add_argument("--port", type=int, default=CONFIG.port)

    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )

    if args.command == "serve":
        serve(args)
        return 0

    runner = run_recipe if args.command == "recipe" else run_menu
    try:
        asyncio.run(runner(args))
    except GenerationError as e:
        console.print(f"[red]{e.title}:[/red] {e}")
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
