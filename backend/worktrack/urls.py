from django.contrib import admin
from django.urls import path, include
from django.http import JsonResponse
from django.http import HttpResponseRedirect
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView
from django.conf import settings


def health(_request):
    return JsonResponse({"status": "ok"})


def root_redirect(request):
    # Open the admin dashboard on the frontend
    frontend = getattr(settings, 'FRONTEND_URL', 'http://localhost:3000')
    return HttpResponseRedirect(f"{frontend.rstrip('/')}/admin/dashboard")


urlpatterns = [
    path('', root_redirect, name='root'),
    path('health/', health, name='health'),

    path('admin/', admin.site.urls),
    path('api/schema/', SpectacularAPIView.as_view(), name='schema'),
    path('api/docs/', SpectacularSwaggerView.as_view(url_name='schema')),
    path('api/auth/', include('accounts.urls')),
    path('api/taxonomy/', include('taxonomy.urls')),
    path('api/academics/', include('academics.urls')),
    path('api/reports/', include('reports.urls')),
]
