# vocabulary/urls.py
from django.urls import path

from . import views

urlpatterns = [
    path("sections/",                         views.sections,          name="sections"),
    path("sections/summary/",                 views.sections_summary,  name="sections-summary"),
    path("sections/<str:section_id>/entries/", views.section_entries,   name="section-entries"),
    path("entries/",                          views.entries,           name="entries"),
    path("entries/preview/",                  views.preview_entries,   name="entries-preview"),

    # practice rotation
    path("practice/next/",                    views.practice_next,     name="practice-next"),
    path("practice/complete/",                views.practice_complete, name="practice-complete"),
    path("practice/today/",                   views.practice_today,    name="practice-today"),
    path("completions/",                      views.completions,       name="completions"),

    # simple health‑check – reachable at /api/vocabulary/health/
    path("health/", views.health, name="health"),
]
