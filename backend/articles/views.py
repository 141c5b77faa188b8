from django.db.models import Q
from rest_framework import viewsets
from rest_framework.permissions import IsAuthenticated

from .models import RobawsArticleCache
from .serializers import RobawsArticleSerializer


class RobawsArticleViewSet(viewsets.ReadOnlyModelViewSet):
    """
    Article picker for quotation requests. Filters: service_type, pod, carrier, search, parents_only.
    """
    serializer_class = RobawsArticleSerializer
    permission_classes = [IsAuthenticated]

    def get_queryset(self):
        params = self.request.query_params
        qs = RobawsArticleCache.objects.filter(is_active=True).select_related("shipping_carrier")

        service_type = params.get("service_type")
        if service_type:
            qs = qs.filter(service_type__iexact=service_type)

        pod = (params.get("pod") or "").strip()
        if pod:
            qs = qs.filter(Q(pod_code__iexact=pod) | Q(pod__icontains=pod))

        carrier = params.get("carrier")
        if carrier:
            qs = qs.filter(Q(shipping_carrier__code__iexact=carrier) | Q(shipping_carrier__isnull=True))

        search = (params.get("search") or "").strip()
        if search:
            qs = qs.filter(Q(article_name__icontains=search) | Q(article_code__icontains=search))

        if params.get("parents_only") in ("1", "true", "True"):
            qs = qs.filter(is_parent_item=True)

        return qs.order_by("article_name")
