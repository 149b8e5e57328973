"""URL routing for the structure catalog."""

from __future__ import annotations

from django.urls import include, path  # type: ignore
from rest_framework.routers import DefaultRouter  # type: ignore

from .views import StructureViewSet

router = DefaultRouter()
router.register(r"", StructureViewSet, basename="structure")

urlpatterns = [
    path("", include(router.urls)),
]
