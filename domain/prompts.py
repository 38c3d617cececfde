import json

from domain.models import FoodInput, RestaurantInput
from domain.pipeline import GenerationRequest


RECIPE_SYSTEM_PROMPT = """
You are a world-class, creative, and detail-oriented assistant for creating
delicious and inspiring recipes.
Your users are competent chefs but are not professionals.
They do not necessarily have access to all the equipment that may be required
for each recipe so make sure to include notes where a non-standard implement may
be required and suggest alternative, more commonly owned implements.
""".strip()


RECIPE_PROMPT = """
Create a detailed, authentic recipe for "{food}" with the following specifications:

Food: {food}
Difficulty level: {difficulty}
Servings: {servings}
Dietary restrictions: {restrictions}

Please provide:
1. A brief description of the dish
2. Accurate preparation and cooking times
3. A complete ingredients list with specific quantities
4. Step-by-step cooking instructions that are easy to follow
5. Helpful cooking tips and techniques
6. Basic nutritional information

Make sure the recipe is practical and achievable for home cooking.
""".strip()


MENU_SYSTEM_PROMPT = """
You are a creative restaurant consultant tasked with designing a complete menu
for a new restaurant. Be creative, funny, and engaging while maintaining
authenticity to the restaurant concept.
""".strip()


MENU_PROMPT = """
Restaurant Specifications:
- Name: {name}
- Theme/Concept: {theme}
- Cuisine Type: {cuisine}
- Price Range: {price_range}
- Atmosphere: {atmosphere}
- Special Feature: {special_feature}

Generate a complete restaurant menu that perfectly captures the theme and
personality of this establishment. Include:
- A catchy tagline that embodies the restaurant's spirit
- Creative and themed menu item names that are both appetizing and amusing
- Detailed descriptions that make each dish sound irresistible
- Appropriate pricing for the specified price range
- At least 4-6 items in each category (appetizers, mains, desserts, beverages)
- Optional specialty items that showcase the restaurant's unique character
- A fun fact about the restaurant that guests would find entertaining
- A vivid description of the restaurant's ambiance and decor

Make the menu items sound delicious while incorporating humor and
theme-appropriate wordplay.
""".strip()


MENU_DESIGN_SYSTEM_PROMPT = """
You are a graphic designer who specialises in printed restaurant menus.
You turn a restaurant concept and its menu into a precise visual design brief.
""".strip()


MENU_DESIGN_PROMPT = """
Design a single-page printed menu card for this restaurant.

Restaurant: {name}
Theme/Concept: {theme}
Atmosphere: {atmosphere}
Price Range: {price_range}
Tagline: {tagline}
Ambiance: {ambiance}

Sections and dishes:
{sections}

Describe the overall style, a four colour palette as hex codes, heading and
body typefaces, the layout of the sections, a few decorative illustrations,
and finally a self-contained prompt an image model can use to draw the card.
""".strip()


MENU_IMAGE_PROMPT = """
{image_prompt}

Menu card for "{name}" with the tagline "{tagline}".
Style: {style}. Layout: {layout}.
Colours: primary {primary}, secondary {secondary}, accent {accent}, background {background}.
Typography: headings in {headings}, body in {body}.
Decorations: {illustrations}.
Show the section headings {section_names} with a few legible dish names.
""".strip()


SECTIONS = ("appetizers", "mains", "desserts", "beverages", "specialties")


def recipe_request(food: FoodInput) -> GenerationRequest:
    prompt = RECIPE_PROMPT.format(
        food=food.food_name,
        difficulty=food.difficulty,
        servings=food.serving_size,
        restrictions=food.dietary_restrictions,
    )
    return GenerationRequest(prompt=prompt, system=RECIPE_SYSTEM_PROMPT)


def menu_request(restaurant: RestaurantInput) -> GenerationRequest:
    prompt = MENU_PROMPT.format(
        name=restaurant.name,
        theme=restaurant.theme,
        cuisine=restaurant.cuisine_type,
        price_range=restaurant.price_range,
        atmosphere=restaurant.atmosphere,
        special_feature=restaurant.special_feature or "None specified",
    )
    return GenerationRequest(prompt=prompt, system=MENU_SYSTEM_PROMPT)


def menu_sections(menu: dict) -> str:
    lines = []
    for section in SECTIONS:
        items = menu.get(section) or []
        if not items:
            continue
        names = ", ".join(item["name"] for item in items)
        lines.append(f"- {section.title()}: {names}")
    return "\n".join(lines)


def menu_design_request(brief: tuple[RestaurantInput, dict]) -> GenerationRequest:
    restaurant, menu = brief
    prompt = MENU_DESIGN_PROMPT.format(
        name=menu["restaurantName"],
        theme=restaurant.theme,
        atmosphere=restaurant.atmosphere,
        price_range=restaurant.price_range,
        tagline=menu["tagline"],
        ambiance=menu["ambiance"],
        sections=menu_sections(menu),
    )
    return GenerationRequest(prompt=prompt, system=MENU_DESIGN_SYSTEM_PROMPT)


def menu_image_request(brief: tuple[dict, dict]) -> GenerationRequest:
    menu, design = brief
    palette = design["palette"]
    typography = design["typography"]
    section_names = [s.title() for s in SECTIONS if menu.get(s)]
    prompt = MENU_IMAGE_PROMPT.format(
        image_prompt=design["imagePrompt"],
        name=menu["restaurantName"],
        tagline=menu["tagline"],
        style=design["style"],
        layout=design["layout"],
        primary=palette["primary"],
        secondary=palette["secondary"],
        accent=palette["accent"],
        background=palette["background"],
        headings=typography["headings"],
        body=typography["body"],
        illustrations=", ".join(design["illustrations"]) or "none",
        section_names=json.dumps(section_names),
    )
    return GenerationRequest(
        prompt=prompt,
        params={"size": "1024x1792", "quality": "standard"},
        output="image",
    )
