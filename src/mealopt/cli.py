"""CLI interface using Typer."""

from __future__ import annotations

import json
import logging
import random
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from mealopt.config import get_settings
from mealopt.data.catalog import load_catalog, sample_catalog
from mealopt.optimizer.models import (
    FoodItem,
    InsufficientCandidatesError,
    MealPlanError,
    OptimizationConstraints,
    UserProfile,
)

app = typer.Typer(
    help="Daily meal plan optimization with a genetic search",
    no_args_is_help=True,
)
console = Console()
err_console = Console(stderr=True)

config_app = typer.Typer(help="Manage configuration")
app.add_typer(config_app, name="config")


# ============================================================================
# Helpers
# ============================================================================


def output_json(response: dict, file=None) -> None:
    """Output JSON response to stdout or file."""
    json_str = json.dumps(response, indent=2)
    if file:
        file.write(json_str)
    else:
        print(json_str)


def configure_logging(verbose: bool) -> None:
    """Route library logging through Rich on stderr."""
    root = logging.getLogger("mealopt")
    root.handlers.clear()
    handler = RichHandler(console=err_console, show_path=False)
    handler.setFormatter(logging.Formatter("%(message)s"))
    root.addHandler(handler)
    root.setLevel(logging.DEBUG if verbose else logging.WARNING)


def resolve_catalog(catalog_path: Optional[Path]) -> list[FoodItem]:
    """Load the catalog from the given path, the configured path, or the sample."""
    path = catalog_path or get_settings().defaults.catalog_path
    if path is None:
        return sample_catalog()
    return load_catalog(path)


def make_profile(
    allergies: Optional[list[str]], restrictions: Optional[list[str]]
) -> UserProfile:
    return UserProfile(
        allergies=set(allergies or []),
        dietary_restrictions=set(restrictions or []),
    )


def fail(command: str, error: str, json_output: bool, suggestions: Optional[list[str]] = None) -> None:
    """Report an error and exit with status 1."""
    if json_output:
        output_json({
            "success": False,
            "command": command,
            "errors": [error],
            "suggestions": suggestions or [],
            "human_summary": f"Error: {error}",
        })
    else:
        console.print(f"[red]{error}[/red]")
        for suggestion in suggestions or []:
            console.print(f"  [dim]{suggestion}[/dim]")
    raise typer.Exit(1)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    """Plan a day of meals from a food catalog."""
    configure_logging(verbose)


# ============================================================================
# Commands
# ============================================================================


@app.command()
def optimize(
    calories: float = typer.Option(..., "--calories", help="Daily calorie target"),
    protein: float = typer.Option(..., "--protein", help="Daily protein target (g)"),
    carbs: float = typer.Option(..., "--carbs", help="Daily carbs target (g)"),
    fat: float = typer.Option(..., "--fat", help="Daily fat target (g)"),
    meals: Optional[int] = typer.Option(None, "--meals", "-m", help="Meals per day"),
    budget: Optional[float] = typer.Option(None, "--budget", "-b", help="Daily budget in dollars"),
    restriction: Optional[list[str]] = typer.Option(
        None, "--restriction", "-r", help="Dietary restriction (vegetarian, vegan, keto, gluten_free). Repeatable."
    ),
    allergy: Optional[list[str]] = typer.Option(
        None, "--allergy", "-a", help="Allergen to exclude. Repeatable."
    ),
    catalog_path: Optional[Path] = typer.Option(
        None, "--catalog", "-c", help="YAML/JSON catalog file (default: built-in sample)"
    ),
    seed: Optional[int] = typer.Option(None, "--seed", help="Random seed for reproducibility"),
    generations: Optional[int] = typer.Option(None, "--generations", help="Override generation count"),
    output: Optional[str] = typer.Option(None, "--output", "-o", help="Output format: table, json"),
    json_output: bool = typer.Option(
        False, "--json", help="Output as JSON with agent-friendly envelope"
    ),
) -> None:
    """Optimize a daily meal plan against explicit targets."""
    from dataclasses import replace

    from mealopt.export.formatters import OUTPUT_FORMATS, format_result, result_to_dict
    from mealopt.optimizer.engine import optimize_meal_plan

    settings = get_settings()
    output_format = output or settings.defaults.output_format
    if output_format not in OUTPUT_FORMATS:
        fail(
            "optimize",
            f"Unknown output format: {output_format}",
            json_output,
            [f"Use one of: {', '.join(OUTPUT_FORMATS)}"],
        )

    params = settings.optimization.to_parameters()
    if generations is not None:
        params = replace(params, generations=generations)
    rng = random.Random(seed if seed is not None else settings.optimization.seed)

    try:
        catalog = resolve_catalog(catalog_path)
        constraints = OptimizationConstraints(
            target_calories=calories,
            target_protein_grams=protein,
            target_carbs_grams=carbs,
            target_fat_grams=fat,
            meals_per_day=meals if meals is not None else settings.defaults.meals_per_day,
            max_budget=budget if budget is not None else settings.defaults.max_budget,
        )
        result = optimize_meal_plan(
            catalog, make_profile(allergy, restriction), constraints, rng, params
        )
    except InsufficientCandidatesError as e:
        fail("optimize", str(e), json_output, ["Relax dietary restrictions or use a larger catalog"])
    except MealPlanError as e:
        fail("optimize", str(e), json_output)

    if json_output:
        output_json({
            "success": True,
            "command": "optimize",
            "data": result_to_dict(result, constraints),
            "warnings": [result.fallback_reason] if result.fallback_reason else [],
            "human_summary": (
                f"{sum(len(f) for f in result.daily_plan.values())} foods, "
                f"{result.actual_nutrition.calories:.0f} kcal, "
                f"score {result.optimization_score:.1f}"
            ),
        })
        return

    text = format_result(
        result, output_format, constraints, console
    )
    if text is not None:
        print(text)


@app.command()
def plan(
    age: Optional[int] = typer.Option(None, "--age", help="Age in years"),
    weight: Optional[float] = typer.Option(None, "--weight", help="Weight in kg"),
    height: Optional[float] = typer.Option(None, "--height", help="Height in cm"),
    gender: Optional[str] = typer.Option(None, "--gender", help="male or female"),
    activity: Optional[str] = typer.Option(
        None, "--activity", help="sedentary, light, moderate, high, athlete"
    ),
    goal: Optional[str] = typer.Option(
        None, "--goal", help="maintain, lose_weight, gain_weight, muscle_gain"
    ),
    meals: Optional[int] = typer.Option(None, "--meals", "-m", help="Meals per day"),
    target_calories: Optional[float] = typer.Option(None, "--calories", help="Explicit calorie target"),
    target_protein: Optional[float] = typer.Option(None, "--protein", help="Explicit protein target (g)"),
    budget_per_meal: Optional[float] = typer.Option(None, "--budget-per-meal", help="Budget per meal in dollars"),
    restriction: Optional[list[str]] = typer.Option(None, "--restriction", "-r", help="Dietary restriction. Repeatable."),
    allergy: Optional[list[str]] = typer.Option(None, "--allergy", "-a", help="Allergen to exclude. Repeatable."),
    catalog_path: Optional[Path] = typer.Option(None, "--catalog", "-c", help="YAML/JSON catalog file"),
    seed: Optional[int] = typer.Option(None, "--seed", help="Random seed for reproducibility"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Derive targets from a body profile and plan a day of meals."""
    from mealopt.export.formatters import TableFormatter, result_to_dict
    from mealopt.planner import generate_meal_plan
    from mealopt.profiles.targets import targets_to_dict

    settings = get_settings()
    profile = UserProfile(
        allergies=set(allergy or []),
        dietary_restrictions=set(restriction or []),
        age=age,
        weight_kg=weight,
        height_cm=height,
        gender=gender,
        activity_level=activity,
        goal=goal,
        meals_per_day=meals,
        target_calories=target_calories,
        target_protein=target_protein,
        budget_per_meal=budget_per_meal,
    )
    rng = random.Random(seed if seed is not None else settings.optimization.seed)

    try:
        response = generate_meal_plan(
            profile,
            resolve_catalog(catalog_path),
            rng,
            settings.optimization.to_parameters(),
        )
    except MealPlanError as e:
        fail("plan", str(e), json_output)

    if response is None:
        fail(
            "plan",
            "Profile incomplete: need age, weight and height, or explicit --calories and --protein",
            json_output,
        )

    constraints = response.targets.to_constraints()
    if json_output:
        data = targets_to_dict(response.targets)
        data.update(result_to_dict(response.result, constraints))
        output_json({
            "success": True,
            "command": "plan",
            "data": data,
            "warnings": [response.result.fallback_reason] if response.result.fallback_reason else [],
            "human_summary": f"Plan for {response.target_calories} kcal/day",
        })
        return

    console.print(
        f"Target: [bold]{response.target_calories}[/bold] kcal/day, "
        f"{response.meals_per_day} meals, goals {response.nutrition_goals}"
    )
    TableFormatter(console).format(response.result, constraints)


@app.command("filter")
def filter_cmd(
    restriction: Optional[list[str]] = typer.Option(None, "--restriction", "-r", help="Dietary restriction. Repeatable."),
    allergy: Optional[list[str]] = typer.Option(None, "--allergy", "-a", help="Allergen to exclude. Repeatable."),
    catalog_path: Optional[Path] = typer.Option(None, "--catalog", "-c", help="YAML/JSON catalog file"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """List catalog foods compatible with allergies and restrictions."""
    from mealopt.optimizer.filters import filter_compatible

    try:
        catalog = resolve_catalog(catalog_path)
    except MealPlanError as e:
        fail("filter", str(e), json_output)

    compatible = filter_compatible(catalog, make_profile(allergy, restriction))

    if json_output:
        output_json({
            "success": True,
            "command": "filter",
            "data": {
                "foods": [f.to_dict() for f in compatible],
                "total_compatible": len(compatible),
                "total_catalog": len(catalog),
            },
            "human_summary": f"{len(compatible)} of {len(catalog)} foods compatible",
        })
        return

    print_foods(compatible, title=f"Compatible foods ({len(compatible)} of {len(catalog)})")


@app.command()
def catalog(
    catalog_path: Optional[Path] = typer.Option(None, "--catalog", "-c", help="YAML/JSON catalog file"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Show the food catalog."""
    try:
        foods = resolve_catalog(catalog_path)
    except MealPlanError as e:
        fail("catalog", str(e), json_output)

    if json_output:
        output_json({
            "success": True,
            "command": "catalog",
            "data": {"foods": [f.to_dict() for f in foods]},
            "human_summary": f"{len(foods)} foods",
        })
        return

    print_foods(foods, title="Catalog")


def print_foods(foods: list[FoodItem], title: str) -> None:
    if not foods:
        console.print("[yellow]No foods[/yellow]")
        return

    table = Table(title=title)
    table.add_column("ID", style="cyan")
    table.add_column("Name")
    table.add_column("kcal", justify="right")
    table.add_column("Protein", justify="right")
    table.add_column("Carbs", justify="right")
    table.add_column("Price", justify="right", style="green")
    table.add_column("Tags", style="blue")
    table.add_column("Allergens", style="red")

    for food in foods:
        table.add_row(
            food.id,
            food.name,
            f"{food.calories:.0f}",
            f"{food.protein_grams:.0f}g",
            f"{food.carbs_grams:.0f}g",
            f"${food.price:.2f}",
            ", ".join(sorted(food.dietary_tags)),
            ", ".join(sorted(food.allergen_tags)),
        )
    console.print(table)


@app.command()
def targets(
    age: Optional[int] = typer.Option(None, "--age", help="Age in years"),
    weight: Optional[float] = typer.Option(None, "--weight", help="Weight in kg"),
    height: Optional[float] = typer.Option(None, "--height", help="Height in cm"),
    gender: Optional[str] = typer.Option(None, "--gender", help="male or female"),
    activity: Optional[str] = typer.Option(None, "--activity", help="Activity level"),
    goal: Optional[str] = typer.Option(None, "--goal", help="Goal"),
    meals: Optional[int] = typer.Option(None, "--meals", "-m", help="Meals per day"),
    keto: bool = typer.Option(False, "--keto", help="Use keto macro split"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Calculate daily calorie and macro targets."""
    from mealopt.profiles.targets import (
        calculate_targets,
        profile_completeness,
        targets_to_dict,
    )

    profile = UserProfile(
        dietary_restrictions={"keto"} if keto else set(),
        age=age,
        weight_kg=weight,
        height_cm=height,
        gender=gender,
        activity_level=activity,
        goal=goal,
        meals_per_day=meals,
    )
    result = calculate_targets(profile)
    if result is None:
        fail("targets", "Need --age, --weight and --height", json_output)

    data = targets_to_dict(result)
    data["profile_completeness"] = round(profile_completeness(profile), 2)

    if json_output:
        output_json({
            "success": True,
            "command": "targets",
            "data": data,
            "human_summary": f"{data['target_calories']} kcal/day",
        })
        return

    goals = data["nutrition_goals"]
    console.print(f"BMR: {data['reference']['bmr']} kcal/day")
    console.print(f"TDEE: {data['reference']['tdee']} kcal/day")
    console.print(f"Target: [bold]{data['target_calories']}[/bold] kcal/day")
    console.print(f"Protein: {goals['protein']}g  Carbs: {goals['carbs']}g  Fat: {goals['fat']}g")
    console.print(f"[dim]Profile {data['profile_completeness']:.0%} complete[/dim]")


# ============================================================================
# Config commands
# ============================================================================


@config_app.command("show")
def config_show() -> None:
    """Show current settings."""
    output_json(get_settings().to_dict())


@config_app.command("init")
def config_init(
    path: Optional[Path] = typer.Option(None, "--path", help="Where to write config.yaml"),
) -> None:
    """Write a config file with default settings."""
    from mealopt.config.settings import Settings

    Settings().save(path)
    console.print("[green]Config written[/green]")


if __name__ == "__main__":
    app()
