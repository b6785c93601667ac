import math

from rest_framework import serializers

from shipments.models import PackageStatus

STATUS_CHOICES = [status.value for status in PackageStatus]


class GeoPointSerializer(serializers.Serializer):
    latitude = serializers.FloatField()
    longitude = serializers.FloatField()
    label = serializers.CharField()


class ProgressSerializer(serializers.Serializer):
    percent_complete = serializers.SerializerMethodField()
    # rounded values shown on the tracking page
    percent = serializers.IntegerField(source="percent_display", allow_null=True)
    traveled_miles = serializers.IntegerField(source="traveled_miles_display", allow_null=True)
    remaining_miles = serializers.IntegerField(source="remaining_miles_display", allow_null=True)
    eta_label = serializers.CharField()

    def get_percent_complete(self, obj):
        # NaN is not valid JSON
        return obj.percent_complete if math.isfinite(obj.percent_complete) else None


class TrackingEventSerializer(serializers.Serializer):
    id = serializers.CharField()
    event_type = serializers.CharField(source="event_type.value")
    description = serializers.CharField()
    location = serializers.CharField(allow_null=True)
    lat = serializers.FloatField(allow_null=True)
    lng = serializers.FloatField(allow_null=True)
    created_at = serializers.CharField(allow_null=True)


class CustomerSummarySerializer(serializers.Serializer):
    first_name = serializers.CharField()
    last_name = serializers.CharField()
    email = serializers.CharField()
    phone = serializers.CharField(allow_null=True)


class PackageSerializer(serializers.Serializer):
    id = serializers.CharField()
    tracking_number = serializers.CharField()
    status = serializers.CharField(source="status.value")
    status_label = serializers.CharField()
    origin_city = serializers.CharField()
    origin_state = serializers.CharField(allow_null=True)
    destination_city = serializers.CharField()
    destination_state = serializers.CharField(allow_null=True)
    current_location = serializers.CharField(allow_null=True)
    current_lat = serializers.FloatField(allow_null=True)
    current_lng = serializers.FloatField(allow_null=True)
    estimated_delivery_date = serializers.CharField(allow_null=True)
    created_at = serializers.CharField(allow_null=True)
    customer = CustomerSummarySerializer(allow_null=True)


class PackageQuerySerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=STATUS_CHOICES, required=False)
    search = serializers.CharField(required=False, allow_blank=False)
    limit = serializers.IntegerField(required=False, min_value=1, max_value=100)
    offset = serializers.IntegerField(required=False, min_value=0)


class LocationUpdateSerializer(serializers.Serializer):
    """
    Same rules as the admin location editor: lat/lng in range, label at least 2 characters.
    """
    lat = serializers.FloatField(min_value=-90, max_value=90)
    lng = serializers.FloatField(min_value=-180, max_value=180)
    label = serializers.CharField(min_length=2)


class StatusUpdateSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=STATUS_CHOICES)
    location = serializers.CharField(required=False, allow_blank=True)
