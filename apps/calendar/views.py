
from rest_framework import serializers, status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema, OpenApiParameter, inline_serializer
from drf_spectacular.types import OpenApiTypes

from apps.accounts.permissions import IsAdminRole, IsManagerRole

from .models import GlobalSettings
from .serializers import (
    GlobalSettingsSerializer,
    HolidaySerializer,
    HolidayCreateSerializer,
    HolidayUpdateSerializer,
    YearQuerySerializer,
    UpcomingOffDaysQuerySerializer,
    OffDaySerializer,
    MonthSettingsSerializer,
    MonthSettingsInputSerializer,
    MonthWindowSerializer,
)
from .services import (
    current_month_window,
    list_holidays,
    create_holiday,
    update_holiday,
    delete_holiday,
    get_upcoming_off_days,
    save_month_settings,
    finalize_month,
    list_month_settings,
    load_policy,
    update_global_settings,
    # Exceptions
    CalendarServiceError,
    HolidayNotFoundError,
    InsufficientPermissionsError,
    MonthSettingsNotFoundError,
)


ErrorResponseSerializer = inline_serializer(
    name='CalendarErrorResponse',
    fields={'error': serializers.CharField()},
)


def _error_response(exc):
    """Map a calendar service error to an HTTP response."""
    if isinstance(exc, InsufficientPermissionsError):
        code = status.HTTP_403_FORBIDDEN
    elif isinstance(exc, (HolidayNotFoundError, MonthSettingsNotFoundError)):
        code = status.HTTP_404_NOT_FOUND
    else:
        code = status.HTTP_400_BAD_REQUEST
    return Response({'error': str(exc)}, status=code)


# =============================================================================
# GLOBAL SETTINGS
# =============================================================================

@extend_schema(
    methods=['GET'],
    responses={200: GlobalSettingsSerializer},
    description="Get the system-wide meal policy.",
    tags=['calendar'],
)
@extend_schema(
    methods=['PATCH'],
    request=GlobalSettingsSerializer,
    responses={200: GlobalSettingsSerializer, 400: ErrorResponseSerializer, 403: ErrorResponseSerializer},
    description="Update the system-wide meal policy (admin only).",
    tags=['calendar'],
)
@api_view(['GET', 'PATCH'])
@permission_classes([IsAuthenticated])
def global_settings(request):
    """Read or update global settings - thin HTTP handler."""
    if request.method == 'GET':
        return Response(GlobalSettingsSerializer(GlobalSettings.load()).data)

    serializer = GlobalSettingsSerializer(data=request.data, partial=True)
    serializer.is_valid(raise_exception=True)

    try:
        settings_row = update_global_settings(actor=request.user, **serializer.validated_data)
    except CalendarServiceError as e:
        return _error_response(e)

    return Response(GlobalSettingsSerializer(settings_row).data)


# =============================================================================
# HOLIDAYS
# =============================================================================

@extend_schema(
    methods=['GET'],
    parameters=[OpenApiParameter('year', OpenApiTypes.INT, description='Filter by year')],
    responses={200: HolidaySerializer(many=True)},
    description="List active holidays.",
    tags=['calendar'],
)
@extend_schema(
    methods=['POST'],
    request=HolidayCreateSerializer,
    responses={201: HolidaySerializer, 400: ErrorResponseSerializer, 403: ErrorResponseSerializer},
    description="Add a holiday (admin only).",
    tags=['calendar'],
)
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def holiday_list(request):
    if request.method == 'GET':
        query = YearQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        holidays = list_holidays(year=query.validated_data.get('year'))
        return Response(HolidaySerializer(holidays, many=True).data)

    serializer = HolidayCreateSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        holiday = create_holiday(actor=request.user, **serializer.validated_data)
    except CalendarServiceError as e:
        return _error_response(e)

    return Response(HolidaySerializer(holiday).data, status=status.HTTP_201_CREATED)


@extend_schema(
    methods=['PATCH'],
    request=HolidayUpdateSerializer,
    responses={200: HolidaySerializer, 400: ErrorResponseSerializer, 404: ErrorResponseSerializer},
    description="Edit a holiday (admin only).",
    tags=['calendar'],
)
@extend_schema(
    methods=['DELETE'],
    responses={204: None, 404: ErrorResponseSerializer},
    description="Delete a holiday (admin only).",
    tags=['calendar'],
)
@api_view(['PATCH', 'DELETE'])
@permission_classes([IsAuthenticated, IsAdminRole])
def holiday_detail(request, pk):
    if request.method == 'DELETE':
        try:
            delete_holiday(actor=request.user, holiday_id=pk)
        except CalendarServiceError as e:
            return _error_response(e)
        return Response(status=status.HTTP_204_NO_CONTENT)

    serializer = HolidayUpdateSerializer(data=request.data, partial=True)
    serializer.is_valid(raise_exception=True)

    try:
        holiday = update_holiday(actor=request.user, holiday_id=pk, **serializer.validated_data)
    except CalendarServiceError as e:
        return _error_response(e)

    return Response(HolidaySerializer(holiday).data)


@extend_schema(
    parameters=[OpenApiParameter('days', OpenApiTypes.INT, description='Window length (default 30)')],
    responses={200: OffDaySerializer(many=True)},
    description="Upcoming default-off days (Fridays, policy Saturdays and holidays).",
    tags=['calendar'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def upcoming_off_days(request):
    query = UpcomingOffDaysQuerySerializer(data=request.query_params)
    query.is_valid(raise_exception=True)

    off_days = get_upcoming_off_days(load_policy(), days=query.validated_data['days'])
    return Response(OffDaySerializer(off_days, many=True).data)


# =============================================================================
# MONTH SETTINGS
# =============================================================================

@extend_schema(
    methods=['GET'],
    parameters=[OpenApiParameter('year', OpenApiTypes.INT, description='Filter by year')],
    responses={200: MonthSettingsSerializer(many=True)},
    description="List month settings.",
    tags=['calendar'],
)
@extend_schema(
    methods=['POST'],
    request=MonthSettingsInputSerializer,
    responses={200: MonthSettingsSerializer, 400: ErrorResponseSerializer, 403: ErrorResponseSerializer},
    description="Create or update the settings of a month (manager+).",
    tags=['calendar'],
)
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def month_settings_list(request):
    if request.method == 'GET':
        query = YearQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        rows = list_month_settings(year=query.validated_data.get('year'))
        return Response(MonthSettingsSerializer(rows, many=True).data)

    serializer = MonthSettingsInputSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data

    try:
        settings_row = save_month_settings(
            actor=request.user,
            year=data['year'],
            month=data['month'],
            start_date=data.get('start_date'),
            end_date=data.get('end_date'),
            notes=data['notes'],
        )
    except CalendarServiceError as e:
        return _error_response(e)

    return Response(MonthSettingsSerializer(settings_row).data)


@extend_schema(
    request=None,
    responses={200: MonthSettingsSerializer, 400: ErrorResponseSerializer, 404: ErrorResponseSerializer},
    description="Finalize a month (manager+). Users and managers can no longer change its meals.",
    tags=['calendar'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated, IsManagerRole])
def finalize_month_settings(request, pk):
    try:
        settings_row = finalize_month(actor=request.user, settings_id=pk)
    except CalendarServiceError as e:
        return _error_response(e)

    return Response(MonthSettingsSerializer(settings_row).data)


@extend_schema(
    responses={200: MonthWindowSerializer},
    description="Window of the current month (custom settings or calendar month).",
    tags=['calendar'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def current_month(request):
    return Response(MonthWindowSerializer(current_month_window().as_dict()).data)
