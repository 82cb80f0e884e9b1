# sa_lotto_project/urls.py

from django.contrib import admin
from django.urls import path, include
from django.views.generic import RedirectView
from .views import HealthCheckView

urlpatterns = [
    # Admin interface
    path('admin/', admin.site.urls),

    # Redirect root to admin
    path('', RedirectView.as_view(url='/admin/', permanent=True)),

    # API endpoints
    path('api/results/', include('results.urls')),

    # Health check
    path('health/', HealthCheckView.as_view(), name='health_check'),
]
