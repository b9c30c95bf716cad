"""
Note Block Music - head-less player
Main entry point
"""
import argparse
import sys
import time

from core.config import load_config
from core.editor import Editor
from audio.sampler import SamplePlayer
from audio.trigger import NullTrigger

FRAME_SECONDS = 1.0 / 60.0
DRAIN_TIMEOUT = 3.0


def play(editor: Editor, frame_seconds: float = FRAME_SECONDS):
    """Run the per-frame loop until the last note tick has fired."""
    last_tick = editor.project.last_tick
    editor.toggle_play()
    print(f"[PLAYBACK] Playing {last_tick + 1} ticks at {editor.transport.ticks_per_second} TPS")

    previous = time.perf_counter()
    while editor.transport.is_started and editor.transport.current_tick <= last_tick:
        time.sleep(frame_seconds)
        now = time.perf_counter()
        fired = editor.update(now - previous)
        previous = now
        if fired:
            print(f"[PLAYBACK] tick {editor.transport.current_tick}: {len(fired)} note(s)")

    editor.stop()
    print("[PLAYBACK] Done")


def main(argv=None) -> int:
    """Launch Note Block Music."""
    ap = argparse.ArgumentParser(description="Play a Note Block Music project")
    ap.add_argument("project", help=".nbm or .nbmp project file")
    ap.add_argument("--tps", type=float, default=None, help="ticks per second")
    ap.add_argument("--sounds", default=None, help="directory with <instrument>.wav samples")
    ap.add_argument("--config", default=None, help="settings JSON file")
    ap.add_argument("--silent", action="store_true", help="schedule notes without audio output")
    args = ap.parse_args(argv)

    print("=== Note Block Music ===")
    config = load_config(args.config)

    player = None
    if args.silent:
        audio = NullTrigger()
    else:
        player = SamplePlayer(config.audio)
        loaded = player.load_samples(args.sounds)
        print(f"[AUDIO] Loaded {loaded} instrument sample(s)")
        if player.start():
            audio = player
        else:
            print("[AUDIO] No output device, continuing silently")
            player = None
            audio = NullTrigger()

    editor = Editor(audio=audio, config=config)

    print(f"[LOAD] Loading: {args.project}")
    try:
        editor.open(args.project)
    except (IOError, ValueError) as e:
        print(f"[ERROR] Failed to load project: {e}")
        if player is not None:
            player.close()
        return 1
    print(f"[LOAD] Loaded {len(editor.project.layers)} layer(s)")

    if args.tps is not None:
        editor.set_tick_rate(args.tps)

    try:
        play(editor)
    except KeyboardInterrupt:
        editor.stop()
    finally:
        if player is not None:
            # Let the last notes ring out
            deadline = time.perf_counter() + DRAIN_TIMEOUT
            while player.active_voices and time.perf_counter() < deadline:
                time.sleep(0.05)
            player.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
