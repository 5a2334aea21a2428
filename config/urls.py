"""
URL configuration for the task management backend.
"""
from django.conf import settings
from django.urls import path
from django.views.decorators.csrf import csrf_exempt
from ninja import NinjaAPI

from apps.core.views import health
from apps.tasks.api import register_exception_handlers, router as tasks_router
from apps.tasks.graphql_schema import TaskGraphQLView, schema

api = NinjaAPI(
    title="Task Management API",
    version="1.0.0",
    description="Task lifecycle over REST",
    docs_url="/docs",
)

api.add_router("/tasks", tasks_router)
register_exception_handlers(api)

graphql_view = TaskGraphQLView.as_view(
    schema=schema,
    graphql_ide="graphiql" if settings.GRAPHQL_PLAYGROUND else None,
)

urlpatterns = [
    path(f"{settings.API_PREFIX.strip('/')}/", api.urls),
    path(settings.GRAPHQL_PATH.strip('/'), csrf_exempt(graphql_view)),
    path('health', health),
]
