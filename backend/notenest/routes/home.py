"""
Landing page routes: page model, testimonial carousel, mobile menu.
"""

from fastapi import APIRouter, Depends

from notenest.context import AppContext, get_app_context
from notenest.schemas.pages import HomePage
from notenest.views import HomeView

router = APIRouter(prefix="/api/home", tags=["Home"])


async def home_view(ctx: AppContext = Depends(get_app_context)) -> HomeView:
    return await ctx.navigate(HomeView)


@router.get("", response_model=HomePage, summary="Landing page")
async def get_home(view: HomeView = Depends(home_view)) -> HomePage:
    return view.page()


@router.post("/testimonials/next", response_model=HomePage, summary="Show next testimonial")
async def next_testimonial(view: HomeView = Depends(home_view)) -> HomePage:
    view.next_testimonial()
    return view.page()


@router.post("/testimonials/previous", response_model=HomePage, summary="Show previous testimonial")
async def previous_testimonial(view: HomeView = Depends(home_view)) -> HomePage:
    view.previous_testimonial()
    return view.page()


@router.post("/menu", response_model=HomePage, summary="Toggle the mobile menu")
async def toggle_menu(view: HomeView = Depends(home_view)) -> HomePage:
    view.toggle_menu()
    return view.page()
