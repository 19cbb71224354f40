from django.urls import include, path

urlpatterns = [
    path("api/", include("concerts.urls")),
    path("api/", include("setlists.urls")),
    path("api/", include("voting.urls")),
]
