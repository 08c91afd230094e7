"""App-scoped client state, created once per session and handed to consumers"""

from dataclasses import dataclass, field

from exceptions import ValidationError
from models.stats import Sport

BUTTON_SIZE = 56
EDGE_PADDING = 20


@dataclass
class FloatingButton:
    """Draggable search button, its position shared across screens"""

    screen_width: float
    screen_height: float
    x: float = 0
    y: float = 0
    search_visible: bool = False

    def bounds(self) -> tuple[float, float, float, float]:
        return (
            EDGE_PADDING,
            max(EDGE_PADDING, self.screen_width - BUTTON_SIZE - EDGE_PADDING),
            EDGE_PADDING,
            max(EDGE_PADDING, self.screen_height - BUTTON_SIZE - EDGE_PADDING),
        )

    def move_to(self, x: float, y: float) -> tuple[float, float]:
        """Drop the button at x, y, kept inside the screen edges"""
        min_x, max_x, min_y, max_y = self.bounds()
        self.x = max(min_x, min(max_x, x))
        self.y = max(min_y, min(max_y, y))
        return self.x, self.y


@dataclass
class AppState:
    selected_sport: Sport = Sport.football
    theme: str = "light"
    floating_button: FloatingButton = field(
        default_factory=lambda: FloatingButton(screen_width=390, screen_height=844)
    )

    def select_sport(self, sport: Sport | str):
        try:
            self.selected_sport = Sport(sport)
        except ValueError:
            raise ValidationError(f"Unknown sport: {sport!r}") from None

    def toggle_theme(self) -> str:
        self.theme = "dark" if self.theme == "light" else "light"
        return self.theme

    def show_search(self, visible: bool = True):
        self.floating_button.search_visible = visible
