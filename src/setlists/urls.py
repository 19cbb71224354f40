from django.urls import path

from .views import setlist_comparison, show_setlist

app_name = "setlists"

urlpatterns = [
    path("shows/<int:show_id>/setlist/", show_setlist, name="show_setlist"),
    path("shows/<int:show_id>/comparison/", setlist_comparison, name="setlist_comparison"),
]
