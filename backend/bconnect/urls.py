from django.contrib import admin
from django.urls import path, include

admin.site.site_header = "B-Connect administration"
admin.site.site_title = "B-Connect"

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/', include('accounts.urls')),
    path('api/', include('core.urls')),
    path('api/', include('pricing.urls')),
    path('api/', include('articles.urls')),
    path('api/', include('tariffs.urls')),
    path('api/', include('quotes.urls')),
]
