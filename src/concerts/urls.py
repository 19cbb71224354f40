from django.urls import path

from .views import calculate_trending, show_detail, show_view, trending

app_name = "concerts"

urlpatterns = [
    path("shows/trending/", trending, name="trending"),
    path("shows/<int:show_id>/", show_detail, name="show_detail"),
    path("shows/<int:show_id>/view/", show_view, name="show_view"),
    path("cron/calculate-trending/", calculate_trending, name="calculate_trending"),
]
