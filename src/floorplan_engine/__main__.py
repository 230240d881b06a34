"""Floor plan engine CLI.

Usage:
    python -m floorplan_engine <command> <plan.json> [options]

All plan modifications go through the 'apply' command with JSON actions.
Read-only commands (rooms, validate, schedule, connected) take the plan
path and print JSON.
"""
from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Optional

import typer

from floorplan_engine.export.schedule import build_schedule
from floorplan_engine.models.floorplan import Floorplan
from floorplan_engine.validators.floorplan import validate_floorplan

app = typer.Typer(
    name="floorplan_engine",
    help="Floor plan engine: rooms, constraints and schedules from sketched walls.",
    no_args_is_help=True,
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _load_plan(path: str) -> Floorplan:
    """Load a plan JSON file, exiting with a JSON error if it is missing or invalid."""
    plan_path = Path(path)
    if not plan_path.exists():
        _output({"ok": False, "error": f"Plan not found: {plan_path}"})
        raise typer.Exit(1)
    try:
        return Floorplan.load(plan_path)
    except (OSError, ValueError) as e:
        _output({"ok": False, "error": f"Cannot load plan {plan_path}: {e}"})
        raise typer.Exit(1)


def _validate_json(plan: Floorplan) -> dict:
    """Run all validators and return structured results."""
    errors = validate_floorplan(plan)
    return {
        "errors": sum(1 for e in errors if e.severity == "error"),
        "warnings": sum(1 for e in errors if e.severity == "warning"),
        "details": [
            {
                "severity": e.severity,
                "element_type": e.element_type,
                "element_id": e.element_id,
                "message": e.message,
            }
            for e in errors
        ],
    }


def _rooms_json(plan: Floorplan) -> list[dict]:
    return [
        {
            "id": room.id,
            "name": room.name,
            "wall_ids": room.wall_ids,
            "area_m2": round(plan.room_area_m2(room.id), 2),
            "ceiling_height": room.ceiling_height,
        }
        for room in plan.rooms.values()
    ]


def _output(data: dict) -> None:
    """Print JSON output to stdout."""
    typer.echo(json.dumps(data, indent=2, ensure_ascii=False))


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log to stderr"),
) -> None:
    """Floor plan engine."""
    if verbose:
        logging.basicConfig(level=logging.INFO, stream=sys.stderr)


# ---------------------------------------------------------------------------
# Read-only commands
# ---------------------------------------------------------------------------

@app.command()
def version() -> None:
    """Show version."""
    from floorplan_engine import __version__

    _output({"ok": True, "version": __version__})


@app.command()
def rooms(plan_path: str = typer.Argument(..., help="Plan JSON file")):
    """Detect rooms and list them with their areas."""
    plan = _load_plan(plan_path)
    _output({"ok": True, "rooms": _rooms_json(plan)})


@app.command()
def validate(plan_path: str = typer.Argument(..., help="Plan JSON file")):
    """Run all validators on a plan."""
    plan = _load_plan(plan_path)
    _output({"ok": True, "validation": _validate_json(plan)})


@app.command()
def schedule(plan_path: str = typer.Argument(..., help="Plan JSON file")):
    """Wall, opening and room tables with areas and U-values."""
    plan = _load_plan(plan_path)
    _output({"ok": True, "schedule": build_schedule(plan)})


@app.command()
def connected(
    plan_path: str = typer.Argument(..., help="Plan JSON file"),
    wall_id: str = typer.Argument(..., help="Wall id"),
):
    """Walls sharing an endpoint with a wall (constraint reference candidates)."""
    plan = _load_plan(plan_path)
    if plan.get_wall(wall_id) is None:
        _output({"ok": False, "error": f"Wall not found: {wall_id}"})
        raise typer.Exit(1)
    walls = plan.connected_walls(wall_id)
    _output({"ok": True, "wall_id": wall_id, "connected": [w.id for w in walls]})


# ---------------------------------------------------------------------------
# Write commands
# ---------------------------------------------------------------------------

@app.command()
def init(
    plan_path: str = typer.Argument(..., help="Plan JSON file to create"),
    name: str = typer.Option("Untitled Plan", "--name", help="Plan name"),
    grid_size: float = typer.Option(100.0, "--grid-size", help="Pixels per meter"),
    force: bool = typer.Option(False, "--force", help="Overwrite an existing file"),
):
    """Create an empty plan."""
    path = Path(plan_path)
    if path.exists() and not force:
        _output({"ok": False, "error": f"Plan already exists: {path}"})
        raise typer.Exit(1)
    plan = Floorplan(name=name, grid_size=grid_size)
    plan.save(path)
    _output({"ok": True, "path": str(path)})


def _point(value) -> tuple[float, float]:
    if isinstance(value, dict):
        return (value["x"], value["y"])
    x, y = value
    return (x, y)


def _dispatch_action(plan: Floorplan, action: dict) -> dict:
    """Execute a single action against the plan. Returns result dict."""
    cmd = action.get("action", "")
    params = {k: v for k, v in action.items() if k != "action"}

    try:
        if cmd == "create-wall":
            wall = plan.create_wall(
                start=_point(params["start"]),
                end=_point(params["end"]),
                height=params.get("height"),
                wall_type=params.get("wall_type"),
                structure_type=params.get("structure_type", ""),
                u_value=params.get("u_value"),
                constraints=params.get("constraints"),
            )
            if wall is None:
                return {"action": cmd, "error": "Wall refused (zero length)"}
            return {"action": cmd, "id": wall.id}

        elif cmd == "update-wall":
            wall_id = params.pop("id")
            moving = params.pop("moving", "end")
            for key in ("start", "end"):
                if key in params:
                    params[key] = _point(params[key])
            wall = plan.update_wall(wall_id, moving=moving, **params)
            if wall is None:
                return {"action": cmd, "error": "Update refused (zero length)"}
            return {"action": cmd, "id": wall.id}

        elif cmd == "delete-wall":
            if not plan.delete_wall(params["id"]):
                return {"action": cmd, "error": f"Wall not found: {params['id']}"}
            return {"action": cmd, "id": params["id"]}

        elif cmd == "create-opening":
            opening = plan.create_opening(
                wall_id=params["wall_id"],
                opening_type=params.get("type", "window"),
                width=params["width"],
                height=params["height"],
                sill_height=params.get("sill_height"),
                u_value=params.get("u_value"),
                position=params.get("position", 0.5),
            )
            if opening is None:
                return {"action": cmd, "error": "Opening does not fit on the wall"}
            return {"action": cmd, "id": opening.id}

        elif cmd == "update-opening":
            opening_id = params.pop("id")
            opening = plan.update_opening(opening_id, **params)
            if opening is None:
                return {"action": cmd, "error": "Opening does not fit on the wall"}
            return {"action": cmd, "id": opening.id}

        elif cmd == "delete-opening":
            if not plan.delete_opening(params["id"]):
                return {"action": cmd, "error": f"Opening not found: {params['id']}"}
            return {"action": cmd, "id": params["id"]}

        elif cmd == "update-room":
            room = plan.update_room(
                params["id"],
                name=params.get("name"),
                ceiling_height=params.get("ceiling_height"),
            )
            if room is None:
                return {"action": cmd, "error": "Room name empty or already used"}
            return {"action": cmd, "id": room.id, "name": room.name}

        elif cmd == "delete-room":
            if not plan.delete_room(params["id"]):
                return {"action": cmd, "error": f"Room not found: {params['id']}"}
            return {"action": cmd, "id": params["id"]}

        elif cmd == "set-grid-size":
            plan.set_grid_size(params["grid_size"])
            return {"action": cmd, "grid_size": plan.grid_size}

        elif cmd == "set-north-angle":
            plan.set_north_angle(params["angle"])
            return {"action": cmd, "north_angle": plan.north_angle}

        else:
            return {"action": cmd, "error": f"Unknown action: {cmd}"}

    except (KeyError, ValueError) as e:
        return {"action": cmd, "error": str(e)}


@app.command()
def apply(
    plan_path: str = typer.Argument(..., help="Plan JSON file"),
    actions_json: Optional[str] = typer.Argument(None, help="JSON array of actions"),
    file: Optional[str] = typer.Option(None, "--file", "-f", help="Read actions from JSON file"),
    stdin: bool = typer.Option(False, "--stdin", help="Read actions from stdin"),
    no_validate: bool = typer.Option(False, "--no-validate", help="Skip validation after apply"),
):
    """Apply modifications to a plan via JSON actions."""
    if stdin:
        raw = sys.stdin.read()
    elif file:
        try:
            raw = Path(file).read_text()
        except OSError as e:
            _output({"ok": False, "error": f"Cannot read actions file: {e}"})
            raise typer.Exit(1)
    elif actions_json:
        raw = actions_json
    else:
        _output({"ok": False, "error": "Provide actions as argument, --file, or --stdin"})
        raise typer.Exit(1)

    try:
        actions = json.loads(raw)
    except json.JSONDecodeError as e:
        _output({"ok": False, "error": f"Invalid JSON: {e}"})
        raise typer.Exit(1)

    if not isinstance(actions, list):
        actions = [actions]  # allow single action without wrapping in array

    plan = _load_plan(plan_path)

    results = []
    for i, action in enumerate(actions):
        result = _dispatch_action(plan, action)
        results.append(result)
        if "error" in result:
            # Stop on first error, nothing is saved
            _output({
                "ok": False,
                "error": f"Action {i} ({action.get('action', '?')}) failed: {result['error']}",
                "applied": i,
                "results": results,
            })
            raise typer.Exit(1)

    plan.save(plan_path)

    output: dict = {
        "ok": True,
        "actions_applied": len(results),
        "results": results,
        "rooms": _rooms_json(plan),
    }
    if not no_validate:
        output["validation"] = _validate_json(plan)
    _output(output)


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    app()
