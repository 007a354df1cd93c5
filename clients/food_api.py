"""HTTP client for restaurant menu feeds."""
import logging

import requests

from processor.models import FoodList

logger = logging.getLogger(__name__)


class FoodClient:
    """Client for the restaurant food list API."""

    def __init__(self, base_url: str, timeout: int = 30):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout

    def fetch_food_list(self, restaurant: str) -> FoodList:
        """
        Fetch today's menu for a restaurant.

        Args:
            restaurant: Restaurant key, e.g. "exactum"

        Returns:
            FoodList, with food_list None when the feed has no menu

        Raises:
            requests.RequestException: If the request fails
            ValueError: If the response is not a JSON object
        """
        url = f"{self.base_url}/{restaurant}"
        logger.info(f"Fetching food list for {restaurant}")
        response = requests.get(url, timeout=self.timeout)
        response.raise_for_status()

        payload = response.json()
        if not isinstance(payload, dict):
            raise ValueError(
                f"Expected a JSON object for {restaurant}, got {type(payload).__name__}"
            )
        return FoodList.from_dict(payload)
