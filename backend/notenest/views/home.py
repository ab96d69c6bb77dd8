"""
Landing page view state: marketing copy and the testimonial carousel.

The carousel advances on its own every `interval` seconds while the view is
mounted. The rotation task is cancelled when the view closes.
"""

import asyncio
from typing import Optional

from notenest.schemas.pages import Feature, HomePage, Step, Testimonial
from notenest.services.session_store import SessionStore
from notenest.views.base import View

HEADLINE = "Organize Your Thoughts. Anytime, Anywhere."
TAGLINE = "A simple, secure, and fast way to take and sync your notes across all your devices."

FEATURES = (
    Feature(
        title="Fast & Simple",
        description=(
            "Lightning-fast performance with an intuitive interface. "
            "Start typing and watch your thoughts flow."
        ),
    ),
    Feature(
        title="Cloud Sync",
        description="Access your notes from anywhere, anytime. All your devices stay perfectly in sync.",
    ),
    Feature(
        title="Secure Storage",
        description="Bank-level encryption keeps your notes safe and private. Your thoughts belong to you.",
    ),
)

STEPS = (
    Step(step="01", title="Sign Up", description="Create your free account in seconds. No credit card required."),
    Step(
        step="02",
        title="Add Your First Note",
        description="Start writing immediately. Rich text, markdown, or plain text, your choice.",
    ),
    Step(
        step="03",
        title="Access Anywhere",
        description="Your notes sync instantly across all your devices. Work from anywhere.",
    ),
)

TESTIMONIALS = (
    Testimonial(
        name="Sarah Chen",
        role="Product Designer",
        avatar="SC",
        quote=(
            "NoteNest has completely transformed how I organize my design ideas. "
            "Clean, fast, and always there when I need it."
        ),
    ),
    Testimonial(
        name="Marcus Johnson",
        role="Software Engineer",
        avatar="MJ",
        quote=(
            "Finally, a notes app that doesn't get in my way. Simple yet powerful. "
            "I use it for everything from code snippets to meeting notes."
        ),
    ),
    Testimonial(
        name="Emily Rodriguez",
        role="Content Writer",
        avatar="ER",
        quote=(
            "The cloud sync is seamless. I can start a draft on my phone and "
            "finish it on my laptop without missing a beat."
        ),
    ),
)


class HomeView(View):
    name = "home"

    def __init__(self, session: SessionStore, interval: float = 5.0):
        super().__init__()
        self.session = session
        self.interval = interval
        self.testimonial_index = 0
        self.menu_open = False
        self._rotation: Optional[asyncio.Task] = None

    async def mount(self) -> None:
        await super().mount()
        if self._rotation is None:
            self._rotation = asyncio.create_task(self._rotate_forever())

    def close(self) -> None:
        if self._rotation is not None:
            self._rotation.cancel()
            self._rotation = None
        super().close()

    @property
    def rotating(self) -> bool:
        return self._rotation is not None and not self._rotation.done()

    def next_testimonial(self) -> None:
        self.testimonial_index = (self.testimonial_index + 1) % len(TESTIMONIALS)

    def previous_testimonial(self) -> None:
        self.testimonial_index = (self.testimonial_index - 1) % len(TESTIMONIALS)

    def toggle_menu(self) -> None:
        self.menu_open = not self.menu_open

    async def _rotate_forever(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            self.next_testimonial()

    def page(self) -> HomePage:
        return HomePage(
            headline=HEADLINE,
            tagline=TAGLINE,
            features=list(FEATURES),
            steps=list(STEPS),
            testimonial=TESTIMONIALS[self.testimonial_index],
            testimonial_index=self.testimonial_index,
            testimonial_count=len(TESTIMONIALS),
            menu_open=self.menu_open,
            signed_in=self.session.is_authenticated,
        )
