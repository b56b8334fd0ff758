"""
mplayer-control CLI - Entry point

Plays a file through mplayer's slave mode and prints status events.
"""

import argparse
import asyncio
import sys
from typing import Any

from mplayer_control.core import (
    Config,
    get_console,
    load_config,
    print_error,
    safe_print,
    setup_from_config,
)
from mplayer_control.domain.playback import (
    MPlayer,
    MediaFileNotFoundError,
    PlayerNotAvailableError,
    check_mplayer_available,
    ensure_mplayer_available,
)


def format_time(seconds: float) -> str:
    """Format time in seconds to MM:SS format."""
    if seconds < 0:
        return "00:00"

    minutes = int(seconds // 60)
    secs = int(seconds % 60)
    return f"{minutes:02d}:{secs:02d}"


def run_check(config: Config) -> int:
    """Check that mplayer can be executed.

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    if check_mplayer_available(config.player.binary):
        safe_print(f"✓ {config.player.binary} is available", "green")
        return 0

    safe_print(f"✗ {config.player.binary} encountered an error or isn't installed", "bold red")
    return 1


async def play_file(config: Config, file: str, initial: dict[str, Any]) -> int:
    """Play ``file`` until mplayer exits.

    Returns:
        Exit code (0 when mplayer ended successfully, 1 otherwise)
    """
    console = get_console()
    player = MPlayer(config)

    player.on("ready", lambda info: safe_print(
        f"Ready: {info.file} ({format_time(info.duration)})", "green"
    ))
    player.on("play", lambda info: safe_print("▶ Playing", "cyan"))
    player.on("pause", lambda info: safe_print("⏸ Paused", "yellow"))
    player.on("stop", lambda info: safe_print("■ Stopped", "yellow"))
    player.on("seek", lambda info: safe_print("Seek"))
    player.on("volume", lambda info: safe_print(f"Volume: {info.volume:.0f}"))
    player.on("time", lambda info: console.print(
        f"{format_time(info.time)} / {format_time(info.duration)} ({info.position:.0%})",
        highlight=False,
    ))
    player.on("error", lambda info: print_error(str(info.error)))

    try:
        player.set_file(file, **initial)
    except MediaFileNotFoundError as e:
        print_error(str(e))
        return 1

    ended = player.wait_for("end")
    failed = player.wait_for("error")
    player.play()

    try:
        done, _ = await asyncio.wait({ended, failed}, return_when=asyncio.FIRST_COMPLETED)
    finally:
        player.close()

    if failed in done:
        return 1

    result = ended.result()
    if not result.success:
        safe_print(
            f"mplayer exited with code={result.exit_code} signal={result.signal}",
            "bold red",
        )
        return 1
    return 0


def run_play(config: Config, file: str, initial: dict[str, Any]) -> int:
    try:
        ensure_mplayer_available(config.player.binary)
    except PlayerNotAvailableError as e:
        print_error(str(e))
        return 1

    try:
        return asyncio.run(play_file(config, file, initial))
    except KeyboardInterrupt:
        return 130
    except ValueError as e:
        print_error(str(e))
        return 1


def main() -> None:
    """Main entry point for the mplayer-control command."""
    parser = argparse.ArgumentParser(
        description="mplayer-control - Drive mplayer in slave mode",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        '--log-level',
        help='Override the configured log level (e.g. DEBUG)'
    )
    parser.add_argument(
        '--fifo',
        help='Path of the control pipe (default from config: ./.mplayer)'
    )
    parser.add_argument(
        '--interval',
        type=int,
        help='Time position poll interval in ms (0 disables polling)'
    )

    subparsers = parser.add_subparsers(dest='subcommand', help='Available commands')

    subparsers.add_parser('check', help='Check that mplayer is installed')

    play_parser = subparsers.add_parser('play', help='Play a file')
    play_parser.add_argument('file', help='Media file to play')
    play_parser.add_argument('--volume', type=float, help='Initial volume (0-100)')
    play_parser.add_argument('--loop', type=int, help='Loop count (0 loops forever)')
    play_parser.add_argument('--time', type=float, help='Start time in seconds')
    play_parser.add_argument('--position', type=float, help='Start position in percent')
    play_parser.add_argument('--speed', type=float, help='Playback speed')
    play_parser.add_argument('--mute', action='store_true', help='Start muted')

    args = parser.parse_args()

    config = load_config()
    if args.log_level:
        config.logging.level = args.log_level.upper()
    if args.fifo:
        config.paths.fifo = args.fifo
    if args.interval is not None:
        config.player.update_interval = args.interval

    setup_from_config(config.logging)

    if args.subcommand == 'check':
        sys.exit(run_check(config))

    elif args.subcommand == 'play':
        initial = {
            name: getattr(args, name)
            for name in ('volume', 'loop', 'time', 'position', 'speed')
            if getattr(args, name) is not None
        }
        if args.mute:
            initial['mute'] = True
        sys.exit(run_play(config, args.file, initial))

    parser.print_help()
    sys.exit(1)


if __name__ == "__main__":
    main()
