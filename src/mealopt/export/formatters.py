"""Output formatters for meal plan results."""

from __future__ import annotations

import json
from datetime import datetime
from typing import Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from mealopt.optimizer.models import MealPlanResult, OptimizationConstraints


def result_to_dict(
    result: MealPlanResult,
    constraints: Optional[OptimizationConstraints] = None,
) -> dict:
    """Convert a MealPlanResult to a JSON-friendly dict."""
    data = {
        "daily_plan": {
            label: [food.to_dict() for food in foods]
            for label, foods in result.daily_plan.items()
        },
        "actual_nutrition": {
            k: round(v, 2) for k, v in result.actual_nutrition.to_dict().items()
        },
        "optimization_score": round(result.optimization_score, 3),
        "used_fallback": result.used_fallback,
        "fallback_reason": result.fallback_reason,
        "generations_run": result.generations_run,
    }
    if constraints is not None:
        data["targets"] = {
            "calories": constraints.target_calories,
            "protein": constraints.target_protein_grams,
            "carbs": constraints.target_carbs_grams,
            "fat": constraints.target_fat_grams,
            "max_budget": constraints.max_budget,
            "meals_per_day": constraints.meals_per_day,
        }
    return data


class TableFormatter:
    """Format results as Rich tables for terminal display."""

    def __init__(self, console: Optional[Console] = None):
        """Initialize the formatter.

        Args:
            console: Rich console for output. If None, creates a new one.
        """
        self.console = console or Console()

    def format(
        self,
        result: MealPlanResult,
        constraints: Optional[OptimizationConstraints] = None,
    ) -> None:
        """Print formatted tables to console."""
        mode = "[yellow]GREEDY FALLBACK[/yellow]" if result.used_fallback else "[green]GENETIC[/green]"
        header_lines = [
            f"[bold]MEAL PLAN[/bold] - {datetime.now().strftime('%Y-%m-%d %H:%M')}",
            f"Method: {mode}",
            f"Score: {result.optimization_score:.2f}",
        ]
        if result.fallback_reason:
            header_lines.append(f"[dim]{result.fallback_reason}[/dim]")

        self.console.print(Panel("\n".join(header_lines), title="Meal Plan"))

        if result.is_empty:
            self.console.print("[yellow]No compatible meals found[/yellow]")
            return

        food_table = Table(title="Daily Plan")
        food_table.add_column("Meal", style="cyan")
        food_table.add_column("Food", max_width=40)
        food_table.add_column("kcal", justify="right")
        food_table.add_column("Protein", justify="right")
        food_table.add_column("Carbs", justify="right")
        food_table.add_column("Fat", justify="right")
        food_table.add_column("Price", justify="right", style="green")

        for label, foods in result.daily_plan.items():
            for i, food in enumerate(foods):
                food_table.add_row(
                    label if i == 0 else "",
                    food.name[:40],
                    f"{food.calories:.0f}",
                    f"{food.protein_grams:.0f}g",
                    f"{food.carbs_grams:.0f}g",
                    f"{food.fat_grams:.0f}g",
                    f"${food.price:.2f}",
                )

        n = result.actual_nutrition
        food_table.add_row(
            "[bold]TOTAL[/bold]",
            "",
            f"[bold]{n.calories:.0f}[/bold]",
            f"[bold]{n.protein:.0f}g[/bold]",
            f"[bold]{n.carbs:.0f}g[/bold]",
            f"[bold]{n.fat:.0f}g[/bold]",
            f"[bold]${n.cost:.2f}[/bold]",
            style="bold",
        )
        self.console.print(food_table)

        if constraints is not None:
            self._print_targets(result, constraints)

    def _print_targets(
        self, result: MealPlanResult, constraints: OptimizationConstraints
    ) -> None:
        n = result.actual_nutrition
        rows = [
            ("Calories", n.calories, constraints.target_calories, "kcal"),
            ("Protein", n.protein, constraints.target_protein_grams, "g"),
            ("Carbs", n.carbs, constraints.target_carbs_grams, "g"),
            ("Fat", n.fat, constraints.target_fat_grams, "g"),
        ]

        table = Table(title="Targets")
        table.add_column("Nutrient")
        table.add_column("Actual", justify="right")
        table.add_column("Target", justify="right")
        table.add_column("Diff", justify="right")

        for name, actual, target, unit in rows:
            diff = (actual - target) / target * 100
            table.add_row(name, f"{actual:.0f} {unit}", f"{target:.0f} {unit}", f"{diff:+.0f}%")

        over = n.cost > constraints.max_budget
        budget_style = "red" if over else "green"
        table.add_row(
            "Budget",
            f"[{budget_style}]${n.cost:.2f}[/{budget_style}]",
            f"${constraints.max_budget:.2f}",
            "over" if over else "ok",
        )
        self.console.print(table)


class JSONFormatter:
    """Format results as JSON for programmatic use."""

    def format(
        self,
        result: MealPlanResult,
        constraints: Optional[OptimizationConstraints] = None,
    ) -> str:
        """Return JSON string."""
        data = {"timestamp": datetime.now().isoformat()}
        data.update(result_to_dict(result, constraints))
        return json.dumps(data, indent=2)


OUTPUT_FORMATS = ("table", "json")


def format_result(
    result: MealPlanResult,
    output_format: str = "table",
    constraints: Optional[OptimizationConstraints] = None,
    console: Optional[Console] = None,
) -> Optional[str]:
    """Format a meal plan in the specified format.

    Args:
        result: Meal plan to format
        output_format: One of 'table', 'json'
        constraints: Targets to compare against, if known
        console: Rich console (for table format)

    Returns:
        Formatted string for json, None for table (prints directly)
    """
    if output_format == "table":
        TableFormatter(console).format(result, constraints)
        return None
    elif output_format == "json":
        return JSONFormatter().format(result, constraints)
    else:
        raise ValueError(f"Unknown output format: {output_format}")
