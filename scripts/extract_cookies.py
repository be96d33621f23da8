"""Extract BOSS recruiter cookies via patchright for the outreach engine.

Usage:
    .venv/bin/python scripts/extract_cookies.py [output path]

Opens a Chromium window. Log in to the recruiter site manually, then press
Enter in the terminal. Cookies are saved to config/cookie.txt as a JSON
array; a running engine picks the new file up automatically.
"""

import json
import sys
from pathlib import Path

LOGIN_URL = "https://www.zhipin.com/web/user/?ka=header-login"
OUTPUT_PATH = Path("config/cookie.txt")


def main() -> None:
    try:
        from patchright.sync_api import sync_playwright
    except ImportError:
        msg = (
            "patchright is required for cookie extraction. "
            "Install with: pip install 'recruiter-outreach[browser]'"
        )
        raise ImportError(msg) from None

    output = Path(sys.argv[1]) if len(sys.argv) > 1 else OUTPUT_PATH
    output.parent.mkdir(parents=True, exist_ok=True)

    with sync_playwright() as p:
        browser = p.chromium.launch(headless=False)
        context = browser.new_context()
        page = context.new_page()
        page.goto(LOGIN_URL)

        input("\n>>> Log in as a recruiter, then press Enter here to save cookies...")

        cookies = [c for c in context.cookies() if "zhipin.com" in c.get("domain", "")]
        output.write_text(json.dumps(cookies, indent=2, ensure_ascii=False), encoding="utf-8")
        print(f"Saved {len(cookies)} cookies to {output}")

        browser.close()


if __name__ == "__main__":
    main()
