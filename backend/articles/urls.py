from rest_framework.routers import DefaultRouter

from .views import RobawsArticleViewSet

router = DefaultRouter()
router.register(r'articles', RobawsArticleViewSet, basename='articles')

urlpatterns = router.urls
