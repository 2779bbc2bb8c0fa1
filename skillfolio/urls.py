from django.conf import settings
from django.conf.urls.static import static
from django.contrib import admin
from django.urls import include, path, re_path

from .views import unknown_path

urlpatterns = [
    path('admin/', admin.site.urls),
    path('', include('accounts.urls')),
    path('', include('portfolios.urls')),
    path('community/', include('community.urls')),
    path('challenge/', include('challenges.urls')),
] + static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)

# Anything else goes back to the sign-in page.
urlpatterns += [
    re_path(r'^.*$', unknown_path, name='unknown'),
]
