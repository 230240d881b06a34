"""Two-room house sketched wall by wall.

Outline: 8m x 5m at 100 px/m, split by an internal wall at x = 4m.
The internal wall lands on the middle of the south and north walls,
which splits both of them so the two rooms close.

   (0,500) ----------- (800,500)
     |          |           |
     |  Living  |  Bedroom  |
     |          |           |
   (0,0) ------------- (800,0)
"""

import json
from pathlib import Path

from floorplan_engine.export.schedule import build_schedule
from floorplan_engine.models import Floorplan, PerpendicularConstraint
from floorplan_engine.validators.floorplan import validate_floorplan

plan = Floorplan(name="Two Room House", north_angle=0)

# --- Outline ---
south = plan.create_wall((0, 0), (800, 0), wall_type="external", u_value=0.24)
east = plan.create_wall((800, 0), (800, 500), wall_type="external", u_value=0.24)
north = plan.create_wall((800, 500), (0, 500), wall_type="external", u_value=0.24)
west = plan.create_wall((0, 500), (0, 0), wall_type="external", u_value=0.24)

# --- Openings (before the split, they follow the wall parts) ---
plan.create_opening(south.id, "door", width=1.0, height=2.1, u_value=1.8, position=0.25)
plan.create_opening(south.id, "window", width=1.5, height=1.2, u_value=1.1, position=0.75)
plan.create_opening(north.id, "window", width=1.2, height=1.2, u_value=1.1, position=0.3)

# --- Internal wall, locked square to the south wall ---
internal = plan.create_wall((400, 0), (400, 500), wall_type="internal")
south_part = plan.connected_walls(internal.id)[0]
plan.update_wall(internal.id, constraints=[PerpendicularConstraint(ref_wall_id=south_part.id)])

living, bedroom = sorted(plan.rooms.values(), key=lambda r: plan.room_centroid(r.id).x)
plan.update_room(living.id, name="Living")
plan.update_room(bedroom.id, name="Bedroom", ceiling_height=2.6)

# --- Validate ---
errors = validate_floorplan(plan)
if errors:
    print("⚠️  Validation issues:")
    for e in errors:
        print(f"  [{e.severity}] {e.element_type}: {e.message}")
else:
    print("✅ Validation passed")

# --- Export ---
output = Path(__file__).parent / "output"
output.mkdir(exist_ok=True)
plan_file = plan.save(output / "two_room_house.json")
schedule_file = output / "two_room_house_schedule.json"
schedule_file.write_text(json.dumps(build_schedule(plan), indent=2, ensure_ascii=False))

print(f"📁 Saved to: {plan_file}")
print(plan.summary())
