"""
PalmOrbit - Hand-gesture control for a 3D photo scene

Entry point for the application.
"""
import argparse
import logging
import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent / "src"))


def parse_args():
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="PalmOrbit - Hand-gesture scene control",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to config file (default: config.yaml)",
    )

    parser.add_argument(
        "--photos",
        type=Path,
        default=None,
        help="Directory with numbered photos 01.jpg, 02.jpg, ... (overrides config)",
    )

    parser.add_argument(
        "--camera",
        type=int,
        default=None,
        help="Camera device id (overrides config)",
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        help="Run the OpenCV debug view with landmark overlay",
    )

    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log gesture changes and suppressed navigation",
    )

    return parser.parse_args()


def resolve_slots(config):
    """Discovered photos laid out on the helix; empty when none are found."""
    from gallery import discover_photos, layout_photos

    if not config.gallery.photo_dir:
        return []
    photos = discover_photos(Path(config.gallery.photo_dir), config.gallery.max_photos)
    return layout_photos(photos)


def run_debug(config, slots=()):
    """
    Run in debug mode - shows camera feed with landmarks, gesture label
    and transform state. Runs the tick loop on the main thread.

    If the camera or model is unavailable the loop keeps ticking with no
    hands and 'r' retries the detector.
    """
    import cv2
    import numpy as np
    from gallery import focused_slot
    from gestures import FrameOrchestrator
    from webcam import HandTracker, DetectorError

    tracker = HandTracker(config)
    orchestrator = FrameOrchestrator(config, item_count=len(slots) or None)

    print("Starting debug mode...")
    print("Press 'q' to quit, 'r' to retry the camera")
    print("-" * 40)

    def start_tracker():
        try:
            tracker.start()
        except DetectorError as e:
            print(f"ERROR ({e.kind.name}): {e}")
            return e
        return None

    error = start_tracker()
    last_label = None
    try:
        while True:
            hands = None
            if error is None:
                try:
                    hands = tracker.get_hands()
                except DetectorError as e:
                    print(f"ERROR ({e.kind.name}): {e}")
                    tracker.stop()
                    error = e

            result = orchestrator.tick(hands)

            frame = tracker.get_frame_with_landmarks(hands)
            if frame is None:
                frame = np.zeros((config.camera.height, config.camera.width, 3), dtype=np.uint8)

            t = result.transform
            cv2.putText(
                frame, result.label, (10, 30),
                cv2.FONT_HERSHEY_SIMPLEX, 1, (0, 204, 255), 2
            )
            info_lines = [
                f"Mode: {t.mode.name}  chaos {t.chaos_factor:.2f}",
                f"Rotation: {t.rotation_angle:+.2f}  speed {t.auto_rotation_speed:+.4f}",
                f"Scale: {t.scale:.2f}  focus {t.focused_index}",
            ]
            slot = focused_slot(slots, t.focused_index)
            if slot is not None:
                info_lines.append(f"Photo: {slot.path.name}  y {slot.y:+.2f}  angle {slot.angle:.2f}")
            for i, line in enumerate(info_lines):
                cv2.putText(
                    frame, line, (10, 60 + i * 25),
                    cv2.FONT_HERSHEY_SIMPLEX, 0.6, (255, 255, 255), 1
                )
            if error is not None:
                for i, line in enumerate((f"{error.kind.name}: {error}", "Press 'r' to retry")):
                    cv2.putText(
                        frame, line, (10, frame.shape[0] - 40 + i * 25),
                        cv2.FONT_HERSHEY_SIMPLEX, 0.6, (0, 0, 255), 1
                    )
            cv2.imshow("PalmOrbit Debug", frame)

            # Print gesture changes to console
            if result.label != last_label:
                print(f"[{tracker.frame_count:5d}] {result.label}")
                last_label = result.label

            key = cv2.waitKey(1) & 0xFF
            if key == ord('q'):
                break
            if key == ord('r') and error is not None:
                error = start_tracker()

    finally:
        tracker.stop()
        cv2.destroyAllWindows()

    return 0


def run_app(config, slots=()):
    """Run PalmOrbit with the status window and a background tick worker."""
    import signal
    import atexit
    from PyQt5.QtWidgets import QApplication
    from PyQt5.QtCore import QThread, Qt
    from webcam import TrackingWorker
    from ui import StatusWindow

    app = QApplication(sys.argv)

    window = StatusWindow(slots)
    window.show()

    # Setup background worker and thread
    thread = QThread()
    worker = TrackingWorker(config, item_count=len(slots) or None)
    worker.moveToThread(thread)

    def cleanup():
        """Ensure camera is released on exit."""
        print("\nCleaning up camera resources...")
        worker.stop_process()
        thread.quit()
        thread.wait(2000)
        print("Cleanup complete.")

    # Register cleanup for various exit scenarios
    atexit.register(cleanup)

    def signal_handler(signum, frame):
        """Handle Ctrl+C and kill signals gracefully."""
        print(f"\nReceived signal {signum}, shutting down...")
        app.quit()

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    # Connect signals (QueuedConnection so UI updates happen in main thread)
    thread.started.connect(worker.start_process)
    worker.frame_processed.connect(window.update_frame, Qt.QueuedConnection)
    worker.frame_ready.connect(window.set_webcam_frame, Qt.QueuedConnection)
    worker.hand_lost.connect(lambda: window.set_webcam_frame(None), Qt.QueuedConnection)
    worker.error.connect(window.show_error, Qt.QueuedConnection)
    # The worker loop never yields to its event loop, so call directly
    window.retry_requested.connect(worker.request_retry, Qt.DirectConnection)

    thread.start()

    try:
        result = app.exec_()
    finally:
        cleanup()
        atexit.unregister(cleanup)  # Avoid double cleanup

    return result


def main():
    """Main entry point."""
    args = parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )

    # Load config
    from gestures import load_config
    config = load_config(args.config)

    # Apply CLI overrides
    if args.photos:
        config.gallery.photo_dir = str(args.photos)
    if args.camera is not None:
        config.camera.device_id = args.camera
    if args.debug:
        config.ui.debug_overlay = True

    slots = resolve_slots(config)

    print("PalmOrbit starting...")
    print(f"  Camera: {config.camera.device_id}")
    print(f"  Gallery items: {len(slots) or config.gallery.item_count}")
    print(f"  Debug: {args.debug}")
    print()

    if config.ui.debug_overlay:
        return run_debug(config, slots)
    return run_app(config, slots)


if __name__ == "__main__":
    sys.exit(main())
