import logging
from typing import List

logger = logging.getLogger(__name__)


class URLParser:
    def parse_url_list(self, raw_value: str, name: str) -> List[str]:
        items = [v.strip().rstrip("/") for v in (raw_value or "").split(",") if v.strip()]

        if "*" in items:
            return ["*"]

        valid_items = [
            v for v in items if v.startswith("http://") or v.startswith("https://")
        ]

        if not valid_items:
            logger.warning("No valid origins found in %s", name)

        return valid_items


parser = URLParser()
