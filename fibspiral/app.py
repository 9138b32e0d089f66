#!/usr/bin/env python3
"""
Fibonacci Spiral - Main Entry Point

Runs the foreground render loop: polls a background spiral session once per
frame and hands the finished rectangles to the configured renderer.
"""

import argparse
import logging
import signal
import sys
import time
from pathlib import Path
from typing import Dict, List, Optional

import yaml

from .errors import SpiralError
from .renderers import ImageRenderer, JsonLinesRenderer, RecordingRenderer, Renderer
from .session import SpiralRequest, SpiralSession


class FibonacciSpiralApp:
    """Main application class."""

    def __init__(self, config_path: str = None, overrides: Optional[Dict] = None):
        """
        Initialize application.

        Args:
            config_path: Path to configuration file. If None, tries config.dev.yaml
                         first, then falls back to config.yaml
            overrides: Per-section values applied on top of the loaded config
        """
        if config_path is None:
            # Check for development config first (relative to working directory)
            dev_config = Path("config.dev.yaml")
            prod_config = Path("config.yaml")
            if dev_config.exists():
                config_path = str(dev_config)
            else:
                config_path = str(prod_config)
        self.config = self._load_config(config_path)
        for section, values in (overrides or {}).items():
            self.config.setdefault(section, {}).update(values)

        self.running = False
        self.logger = logging.getLogger(__name__)

        width = self.config['window']['width']
        height = self.config['window']['height']
        self.renderer = self._create_renderer()
        self.session = SpiralSession(self.renderer, width, height, self.config)

        # Active request; None once it is dropped or done
        self.request: Optional[SpiralRequest] = self._request_from_config()
        self.completed_passes = 0

        # Setup signal handlers
        signal.signal(signal.SIGINT, self._signal_handler)
        signal.signal(signal.SIGTERM, self._signal_handler)

    def _load_config(self, config_path: str) -> dict:
        """
        Load configuration from YAML file, merged over the defaults.

        Args:
            config_path: Path to config file

        Returns:
            Configuration dictionary
        """
        config = self._default_config()
        try:
            with open(config_path, 'r') as f:
                loaded = yaml.safe_load(f) or {}
                print(f"Configuration loaded from {config_path}", file=sys.stderr)
        except FileNotFoundError:
            print(f"Warning: Config file {config_path} not found, using defaults", file=sys.stderr)
            return config
        except (OSError, yaml.YAMLError) as e:
            print(f"Error loading config: {e}", file=sys.stderr)
            return config

        for section, values in loaded.items():
            if isinstance(values, dict) and isinstance(config.get(section), dict):
                config[section].update(values)
            else:
                config[section] = values
        return config

    def _default_config(self) -> dict:
        """
        Get default configuration.

        Returns:
            Default configuration dictionary
        """
        return {
            'window': {
                'width': 1280,
                'height': 720
            },
            'session': {
                'spin_interval': 0.001,
                'ready_timeout': 10.0,
                'join_timeout': 5.0
            },
            'render': {
                'frame_interval': 0.016,
                'sink': 'recording',
                'image_file': 'spiral.png',
                'continuous': False
            },
            'request': {
                'first': 0,
                'second': 20,
                'load_file': None,
                'save': False
            },
            'persistence': {
                'directory': '.',
                'binary_file': 'fibspiral.bin',
                'text_file': 'fibspiral.txt'
            },
            'logging': {
                'level': 'INFO',
                'file': None
            }
        }

    def _setup_logging(self):
        """Setup logging configuration."""
        log_level = getattr(logging, self.config['logging']['level'].upper())
        log_file = self.config['logging'].get('file')

        # Configure root logger
        logging.basicConfig(
            level=log_level,
            format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )

        # Add file handler if specified
        if log_file:
            try:
                file_handler = logging.FileHandler(log_file)
                file_handler.setFormatter(
                    logging.Formatter('%(asctime)s [%(levelname)s] %(name)s: %(message)s')
                )
                file_handler.setLevel(log_level)
                logging.getLogger().addHandler(file_handler)
                self.logger.info(f"Logging to file: {log_file}")
            except OSError as e:
                self.logger.warning(f"Could not setup file logging: {e}")

    def _create_renderer(self) -> Renderer:
        """
        Build the renderer named by ``render.sink``.

        Returns:
            Renderer instance ('recording' for unknown names)
        """
        render_config = self.config['render']
        sink = render_config.get('sink', 'recording')

        if sink == 'jsonl':
            return JsonLinesRenderer(sys.stdout)
        if sink == 'image':
            return ImageRenderer(render_config.get('image_file', 'spiral.png'))
        if sink != 'recording':
            print(f"Warning: Unknown render sink '{sink}', recording in memory", file=sys.stderr)
        return RecordingRenderer()

    def _request_from_config(self) -> SpiralRequest:
        """Build the initial request from the ``request`` section."""
        request_config = self.config['request']
        return SpiralRequest(
            first=int(request_config.get('first', 0)),
            second=int(request_config.get('second', 0)),
            load_path=request_config.get('load_file'),
            save=bool(request_config.get('save', False))
        )

    def _signal_handler(self, signum, frame):
        """
        Handle shutdown signals.

        Args:
            signum: Signal number
            frame: Stack frame
        """
        self.logger.info(f"Received signal {signum}, shutting down...")
        self.running = False

    def _drop_request(self, reason: str):
        """Forget the active request so it is not retried."""
        self.logger.error(f"Request dropped: {reason}")
        self.request = None

    def tick(self) -> Optional[str]:
        """
        Run one frame of the foreground loop.

        Returns:
            The session's poll result, or None when there is nothing to do
        """
        if self.request is None:
            return None

        # A session that never reaches READY is treated as failed
        ready_timeout = self.config['session']['ready_timeout']
        if (self.session.state == SpiralSession.STATE_BUILDING
                and self.session.started_at is not None
                and time.monotonic() - self.session.started_at > ready_timeout):
            self.session.abort()
            self._drop_request(f"sequence not ready after {ready_timeout} seconds")
            return SpiralSession.POLL_FAILED

        try:
            status = self.session.poll(self.request)
        except SpiralError as e:
            self._drop_request(str(e))
            return SpiralSession.POLL_FAILED

        if status == SpiralSession.POLL_FAILED:
            self._drop_request("background session could not read its source")
        elif status == SpiralSession.POLL_RENDERED:
            self.completed_passes += 1
            if not self.config['render'].get('continuous', False):
                self.request = None

        return status

    def run(self) -> int:
        """
        Main render loop.

        Returns:
            Process exit code (0 if at least one pass was rendered)
        """
        self._setup_logging()
        self.logger.info("="*60)
        self.logger.info("Fibonacci Spiral Starting")
        self.logger.info("="*60)

        frame_interval = self.config['render']['frame_interval']
        self.running = True

        try:
            while self.running and self.request is not None:
                self.tick()
                time.sleep(frame_interval)

        except KeyboardInterrupt:
            self.logger.info("Keyboard interrupt received")

        finally:
            # Cleanup
            if self.session.started:
                self.session.abort()

        self.logger.info(f"Fibonacci Spiral stopped after {self.completed_passes} render pass(es)")
        return 0 if self.completed_passes else 1


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Golden-ratio spiral from a Fibonacci sequence"
    )
    parser.add_argument(
        "config",
        nargs="?",
        default=None,
        help="Path to YAML config (default: config.dev.yaml or config.yaml)"
    )
    parser.add_argument(
        "--first", "-f",
        type=int,
        help="Number of leading Fibonacci samples to skip"
    )
    parser.add_argument(
        "--second", "-s",
        type=int,
        help="Index of the last Fibonacci number to generate"
    )
    parser.add_argument(
        "--load", "-l",
        help="Load the sequence from a raw .bin file instead"
    )
    parser.add_argument(
        "--save",
        action="store_true",
        help="Save the sequence as .bin and .txt"
    )
    parser.add_argument(
        "--sink",
        choices=["recording", "jsonl", "image"],
        help="Where to send the rectangles"
    )
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = _parse_args(argv)

    overrides: Dict[str, Dict] = {'request': {}, 'render': {}}
    if args.first is not None:
        overrides['request']['first'] = args.first
    if args.second is not None:
        overrides['request']['second'] = args.second
    if args.load is not None:
        overrides['request']['load_file'] = args.load
    if args.save:
        overrides['request']['save'] = True
    if args.sink is not None:
        overrides['render']['sink'] = args.sink

    # Create and run app
    app = FibonacciSpiralApp(args.config, overrides)
    return app.run()


if __name__ == "__main__":
    sys.exit(main())
