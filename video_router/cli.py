"""
Command-line interface for routing a video generation request.

Examples:
    clipgen.py -p "A red fox running through snow"
    clipgen.py --provider runwayml -p "Slow pan over a city" --duration 10
    clipgen.py --provider luma -i reference.png -p "Bring this scene to life"
    clipgen.py --list-providers --budget 0.03
    clipgen.py --provider openai-sora --duration 20 --count 2 --estimate
"""

import argparse
import json
import sys
from typing import List, Optional

from .config import RouterConfig, get_api_key_env_var, print_available_providers, resolve_api_key
from .exceptions import InvalidRequestError
from .logger import init_library_logger
from .normalizer import DEFAULT_ASPECT_RATIO, DEFAULT_DURATION_SECONDS, default_duration, normalize_request
from .pricing import billable_seconds, estimate_cost, format_cost
from .registry import get_provider_by_id, get_provider_ids
from .video_generator import VideoGenerator

DEFAULT_PROVIDER = "veo-3"

EXIT_SUCCESS = 0
EXIT_FAILURE = 1
EXIT_CANCELLED = 130


def create_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser."""
    parser = argparse.ArgumentParser(
        prog="clipgen.py",
        description="Generate video with one of several AI video providers",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
Providers: {', '.join(get_provider_ids())}

Examples:
  # Text to video with the default provider
  clipgen.py -p "A red fox running through snow"

  # Image to video
  clipgen.py --provider luma -i reference.png -p "Bring this scene to life"

  # Providers under a per-second budget
  clipgen.py --list-providers --budget 0.03

Configuration:
  API keys are read from the environment or a .env file, e.g. VEO3_API_KEY,
  RUNWAY_API_KEY, LUMA_API_KEY. Use --list-providers to see which are set.
        """
    )

    parser.add_argument(
        "-p", "--prompt",
        help="Text prompt describing the video"
    )

    parser.add_argument(
        "--provider",
        default=DEFAULT_PROVIDER,
        help=f"Provider id (default: {DEFAULT_PROVIDER})"
    )

    parser.add_argument(
        "--negative-prompt",
        help="What the video should avoid (where supported)"
    )

    parser.add_argument(
        "--duration",
        type=int,
        help=("Clip duration in seconds; allowed values vary by provider "
              f"(default: {DEFAULT_DURATION_SECONDS}, or the first duration the provider accepts)")
    )

    parser.add_argument(
        "--aspect-ratio",
        default=DEFAULT_ASPECT_RATIO,
        help=f"Aspect ratio, e.g. 16:9 or 9:16 (default: {DEFAULT_ASPECT_RATIO})"
    )

    parser.add_argument(
        "--count",
        type=int,
        default=1,
        help="Number of videos to generate (default: 1)"
    )

    parser.add_argument(
        "-i", "--image",
        help="Conditioning image for image-to-video generation"
    )

    parser.add_argument(
        "--model",
        help="Model tier (default: provider's default model)"
    )

    parser.add_argument(
        "--resolution",
        help="Output resolution, e.g. 720p or 1080p (where supported)"
    )

    parser.add_argument(
        "--fps",
        type=int,
        help="Frames per second (where supported)"
    )

    parser.add_argument(
        "--no-audio",
        action="store_true",
        help="Disable generated audio (where supported)"
    )

    parser.add_argument(
        "--api-key",
        help="API key for the provider (default: read from environment)"
    )

    parser.add_argument(
        "--list-providers",
        action="store_true",
        help="List providers with pricing and exit"
    )

    parser.add_argument(
        "--budget",
        type=float,
        help="With --list-providers, only show providers at or under this cost per second"
    )

    parser.add_argument(
        "--estimate",
        action="store_true",
        help="Print the estimated cost and exit without generating"
    )

    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the result as JSON"
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging"
    )

    return parser


def _print_estimate(args: argparse.Namespace) -> int:
    descriptor = get_provider_by_id(args.provider)
    if descriptor is None:
        print(f"❌ Unknown provider: {args.provider}")
        return EXIT_FAILURE
    duration = default_duration(descriptor) if args.duration is None else args.duration
    if duration < 1 or args.count < 1:
        print("❌ Duration and count must be at least 1")
        return EXIT_FAILURE

    total_seconds = duration * args.count
    cost = estimate_cost(descriptor, duration, args.count)
    currency = descriptor.pricing.currency

    if args.json:
        print(json.dumps({"provider": descriptor.id, "seconds": total_seconds, "cost": cost}))
        return EXIT_SUCCESS

    print(f"💰 {descriptor.name}: {total_seconds}s of video = {format_cost(cost, currency)}")
    if descriptor.pricing.free_tier:
        billable = billable_seconds(descriptor, total_seconds)
        print(f"   Free tier: {descriptor.pricing.free_tier.description} "
              f"({billable:g}s billable if unused)")
    return EXIT_SUCCESS


def _build_form(args: argparse.Namespace) -> dict:
    return {
        "prompt": args.prompt,
        "provider": args.provider,
        "negative_prompt": args.negative_prompt,
        "duration_seconds": args.duration,
        "aspect_ratio": args.aspect_ratio,
        "number_of_videos": args.count,
        "model": args.model,
        "resolution": args.resolution,
        "fps": args.fps,
        "audio": False if args.no_audio else None,
    }


def _print_result(result, as_json: bool) -> None:
    if as_json:
        print(json.dumps(result.to_dict(), indent=2))
        return

    if result.success:
        print("\n✅ Video generation completed successfully!")
        for url in result.videos:
            print(f"   🎬 {url}")
        if result.cost is not None:
            print(f"   💰 Cost: {format_cost(result.cost)}")
    else:
        print(f"\n❌ Video generation failed [{result.error_kind}]")
        print(f"   {result.error}")


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the CLI.

    Returns:
        Process exit code: 0 on success, 1 on failure
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.list_providers:
        print_available_providers(args.budget)
        return EXIT_SUCCESS

    if args.estimate:
        return _print_estimate(args)

    try:
        config = RouterConfig.from_environment()
    except ValueError as e:
        print(f"❌ Configuration error: {e}")
        return EXIT_FAILURE

    init_library_logger(verbose=args.verbose, log_dir=config.log_dir)

    if not args.prompt or not args.prompt.strip():
        print("❌ No prompt provided.\nTip: use -p 'Your prompt here'")
        return EXIT_FAILURE

    try:
        request = normalize_request(_build_form(args), args.image)
    except InvalidRequestError as e:
        print(f"❌ Invalid request: {e}")
        return EXIT_FAILURE

    api_key = args.api_key or resolve_api_key(request.provider_id)
    if not api_key and get_provider_by_id(request.provider_id) is not None:
        print(f"⚠️  No API key found. Set {get_api_key_env_var(request.provider_id)} or pass --api-key")

    if not args.json:
        print(f"🎯 Using provider: {request.provider_id}")
        print(f"📝 Prompt: {request.prompt[:100]}{'...' if len(request.prompt) > 100 else ''}")
        print("🚀 Starting video generation...")

    generator = VideoGenerator(config=config)
    try:
        result = generator.generate_video(request.provider_id, request, api_key)
    except KeyboardInterrupt:
        print("\n👋 Video generation cancelled by user")
        return EXIT_CANCELLED

    _print_result(result, args.json)
    return EXIT_SUCCESS if result.success else EXIT_FAILURE


if __name__ == "__main__":
    sys.exit(main())
