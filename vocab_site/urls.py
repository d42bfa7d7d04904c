# vocab_site/urls.py
from django.urls import include, path

urlpatterns = [
    path("api/vocabulary/", include("vocabulary.urls")),
    # login/logout for the browsable API; sign-in itself is Django auth
    path("api-auth/", include("rest_framework.urls")),
]
