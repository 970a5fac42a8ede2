"""
Command-line makeover client

Usage:
    makeover --endpoint http://localhost:8000 --image room.jpg --style Modern --room-type "Living Room"

Description:
    - Sends the room photo to a running API and generates a design plan
    - Generates the redesigned image (a failed image still keeps the plan)
    - Optionally fetches more palettes and re-renders with one of them
    - Writes design_plan.json and redesigned.png to the output directory
"""
import argparse
import base64
import json
from io import BytesIO
from pathlib import Path
from typing import List, Optional

from PIL import Image

from .client.api_client import DesignApiClient
from .client.feedback import FeedbackLog, JsonFileStore
from .client.orchestrator import MakeoverSession
from .constants import DESIGN_STYLES, ROOM_TYPES
from .models.schemas import RoomDimensions


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='AI room makeover client')
    parser.add_argument('--endpoint', default='http://localhost:8000', help='API endpoint URL')
    parser.add_argument('--image', required=True, help='Room photo to redesign')
    parser.add_argument('--style', default=DESIGN_STYLES[0], choices=DESIGN_STYLES, help='Design style')
    parser.add_argument('--room-type', default=ROOM_TYPES[0], choices=ROOM_TYPES, help='Room type')
    parser.add_argument('--width', type=float, help='Room width')
    parser.add_argument('--length', type=float, help='Room length')
    parser.add_argument('--unit', default='ft', choices=['ft', 'm'], help='Unit for width/length')
    parser.add_argument('--more-palettes', action='store_true', help='Ask for 3 more alternative palettes')
    parser.add_argument('--recolor', type=int, metavar='INDEX',
                        help='Re-render using alternative palette INDEX (0-based)')
    parser.add_argument('--rate', choices=['up', 'down'], help='Record feedback on the plan')
    parser.add_argument('--comment', default='', help='Feedback comment (with --rate)')
    parser.add_argument('--timeout', type=float, help='Request timeout in seconds')
    parser.add_argument('--output', default='makeover_output', help='Output directory')
    return parser


def save_image(base64_image: str, path: Path) -> None:
    """Decode the base64 result and save it through Pillow"""
    image = Image.open(BytesIO(base64.b64decode(base64_image)))
    image.save(str(path))


def print_summary(session: MakeoverSession) -> None:
    plan = session.plan
    print(f"\nStyle: {session.style} | Room: {session.room_type}")
    print(f"Wall color: {plan.wall_color.color} (accent {plan.wall_color.accent})")
    print(f"Flooring: {plan.flooring}")
    print(f"Lighting: {plan.lighting}")
    cost = plan.estimated_cost
    print(f"Budget: {cost.min:,.0f} - {cost.max:,.0f} {cost.currency}")

    print("\nFurniture:")
    for item in plan.furniture_suggestions:
        print(f"- {item.name} (~{item.estimated_price:,.0f}): {item.placement}")

    print("\nAlternative palettes:")
    for index, palette in enumerate(plan.alternative_palettes):
        print(f"  [{index}] {palette.color} & {palette.accent}")


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    image_path = Path(args.image)
    if not image_path.exists():
        print(f"Error: image '{args.image}' not found.")
        return 2

    output_dir = Path(args.output)
    output_dir.mkdir(parents=True, exist_ok=True)

    client = DesignApiClient(args.endpoint, timeout=args.timeout)
    session = MakeoverSession(client, FeedbackLog(JsonFileStore(output_dir / "feedback.json")))
    session.set_image(image_path.read_bytes())
    session.style = args.style
    session.room_type = args.room_type
    session.dimensions = RoomDimensions(width=args.width, length=args.length, unit=args.unit)

    print(f"Generating {args.style} makeover for {image_path.name}...")
    session.generate()
    if session.plan is None:
        print(f"\n{session.error}")
        return 1
    if session.error:
        print(f"\nWarning: {session.error}")

    if args.more_palettes:
        session.suggest_more_palettes()
        if session.error:
            print(f"\nWarning: {session.error}")

    if args.recolor is not None:
        palettes = session.plan.alternative_palettes
        if not 0 <= args.recolor < len(palettes):
            print(f"Error: --recolor must be between 0 and {len(palettes) - 1}.")
            return 2
        palette = palettes[args.recolor]
        print(f"Re-rendering with {palette.color} & {palette.accent}...")
        session.change_colors(palette)
        if session.error:
            print(f"\nWarning: {session.error}")

    plan_path = output_dir / "design_plan.json"
    with open(plan_path, 'w', encoding='utf-8') as f:
        json.dump(session.plan.to_wire(), f, ensure_ascii=False, indent=2)

    print_summary(session)
    print(f"\nDesign plan saved to {plan_path}")

    if session.generated_image:
        image_out = output_dir / "redesigned.png"
        save_image(session.generated_image, image_out)
        print(f"Redesigned image saved to {image_out}")

    if args.rate:
        if session.submit_feedback(args.rate, args.comment):
            print("Thank you for your feedback!")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
