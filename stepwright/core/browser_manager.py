"""Browser management and lifecycle"""
import os
from pathlib import Path
from typing import Dict

from playwright.sync_api import sync_playwright, Page

from stepwright.utils.helpers import sanitize_filename
from stepwright.utils.logger import setup_logger

logger = setup_logger(__name__)


class BrowserManager:
    """Starts one browser page per scenario and tears it down afterwards"""

    def __init__(self, options: Dict):
        self.options = options
        self.playwright = None
        self.browser = None
        self.context = None
        self.page = None

    def start(self) -> Page:
        """Start browser and return page instance"""
        browser_name = self.options.get('type', 'chromium')
        logger.info(f"Starting {browser_name} browser")

        self.playwright = sync_playwright().start()

        # Select browser type
        browser_type = getattr(self.playwright, browser_name)

        # Launch options
        launch_options = {
            'headless': self.options.get('headless', True),
            'slow_mo': self.options.get('slow_mo', 0),
        }
        self.browser = browser_type.launch(**launch_options)

        # Context options
        viewport = self.options.get('viewport') or {'width': 1920, 'height': 1080}
        context_options = {
            'viewport': viewport,
            'ignore_https_errors': self.options.get('ignore_https_errors', True),
        }

        if self.options.get('video', False):
            videos_dir = self.options.get('videos_dir', 'reports/videos')
            os.makedirs(videos_dir, exist_ok=True)
            context_options['record_video_dir'] = videos_dir
            context_options['record_video_size'] = viewport

        self.context = self.browser.new_context(**context_options)
        self.page = self.context.new_page()

        # Enable console logging
        self.page.on("console", lambda msg: logger.debug(f"Browser console: {msg.text}"))

        return self.page

    def stop(self):
        """Stop browser and cleanup"""
        if self.page:
            self.page.close()
        if self.context:
            self.context.close()
        if self.browser:
            self.browser.close()
        if self.playwright:
            self.playwright.stop()
        self.page = self.context = self.browser = self.playwright = None


def save_artifact(directory: str, name: str, body: bytes, extension: str = 'png') -> str:
    """Write an artifact body to ``directory/name.extension`` and return the path"""
    os.makedirs(directory, exist_ok=True)
    path = Path(directory) / f"{sanitize_filename(name)}.{extension}"
    path.write_bytes(body)
    return str(path)
