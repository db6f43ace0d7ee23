from rest_framework import serializers, status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema, OpenApiParameter, inline_serializer
from drf_spectacular.types import OpenApiTypes

from apps.accounts.permissions import IsAdminRole, IsManagerRole
from apps.calendar.services import CalendarServiceError

from .serializers import (
    MealSerializer,
    EffectiveStatusSerializer,
    CalendarDaySerializer,
    TogglePermissionSerializer,
    MealQuerySerializer,
    MealRangeQuerySerializer,
    MonthQuerySerializer,
    MealToggleSerializer,
    BulkToggleSerializer,
    MealCountSerializer,
    ResetMealsSerializer,
    MealSummarySerializer,
    DailyMealQuerySerializer,
    DailyMealsSerializer,
    RuleOverrideSerializer,
    OverrideCreateSerializer,
    OverrideUpdateSerializer,
    OverrideListQuerySerializer,
)
from .services import (
    get_meal_status,
    get_meal_toggle_permission,
    get_meal_calendar,
    get_meal_summary,
    get_daily_meals,
    toggle_meal,
    bulk_toggle_meals,
    update_meal_count,
    reset_to_default,
    create_override,
    update_override,
    delete_override,
    toggle_override_active,
    list_overrides,
    check_overrides,
    # Exceptions
    MealsServiceError,
    InsufficientPermissionsError,
    UserNotFoundError,
    OverrideNotFoundError,
    ToggleNotAllowedError,
    NoToggleableDatesError,
)


ErrorResponseSerializer = inline_serializer(
    name='MealsErrorResponse',
    fields={'error': serializers.CharField()},
)

DATE_PARAM = OpenApiParameter('date', OpenApiTypes.DATE, required=True)
MEAL_TYPE_PARAM = OpenApiParameter('meal_type', OpenApiTypes.STR, required=True, enum=['lunch', 'dinner'])
USER_PARAM = OpenApiParameter('user_id', OpenApiTypes.UUID, description='Another user (manager or higher)')


def _error_response(exc):
    """Map a meals or calendar service error to an HTTP response."""
    body = {'error': str(exc)}

    if isinstance(exc, ToggleNotAllowedError):
        body.update(source=exc.source, reason_bn=exc.reason_bn)
        return Response(body, status=status.HTTP_403_FORBIDDEN)
    if isinstance(exc, NoToggleableDatesError):
        body['skipped'] = exc.skipped
        return Response(body, status=status.HTTP_400_BAD_REQUEST)
    if isinstance(exc, InsufficientPermissionsError):
        return Response(body, status=status.HTTP_403_FORBIDDEN)
    if isinstance(exc, (OverrideNotFoundError, UserNotFoundError)):
        return Response(body, status=status.HTTP_404_NOT_FOUND)
    return Response(body, status=status.HTTP_400_BAD_REQUEST)


# =============================================================================
# MEAL READS
# =============================================================================

@extend_schema(
    parameters=[
        OpenApiParameter('start_date', OpenApiTypes.DATE, required=True),
        OpenApiParameter('end_date', OpenApiTypes.DATE, required=True),
        USER_PARAM,
    ],
    responses={200: CalendarDaySerializer(many=True), 400: ErrorResponseSerializer, 403: ErrorResponseSerializer},
    description="Effective lunch/dinner status and editability for each day of a window (max 31 days).",
    tags=['meals'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def meal_calendar(request):
    query = MealRangeQuerySerializer(data=request.query_params)
    query.is_valid(raise_exception=True)

    try:
        days = get_meal_calendar(
            viewer=request.user,
            start_date=query.validated_data['start_date'],
            end_date=query.validated_data['end_date'],
            user_id=query.validated_data.get('user_id'),
        )
    except (MealsServiceError, CalendarServiceError) as e:
        return _error_response(e)

    return Response(CalendarDaySerializer(days, many=True).data)


@extend_schema(
    parameters=[DATE_PARAM, MEAL_TYPE_PARAM, USER_PARAM],
    responses={200: EffectiveStatusSerializer, 400: ErrorResponseSerializer, 403: ErrorResponseSerializer},
    description="Resolve the effective status of one meal.",
    tags=['meals'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def meal_status(request):
    query = MealQuerySerializer(data=request.query_params)
    query.is_valid(raise_exception=True)

    try:
        effective = get_meal_status(
            viewer=request.user,
            day=query.validated_data['date'],
            meal_type=query.validated_data['meal_type'],
            user_id=query.validated_data.get('user_id'),
        )
    except (MealsServiceError, CalendarServiceError) as e:
        return _error_response(e)

    return Response(EffectiveStatusSerializer(effective.as_dict()).data)


@extend_schema(
    parameters=[DATE_PARAM, MEAL_TYPE_PARAM],
    responses={200: TogglePermissionSerializer, 400: ErrorResponseSerializer},
    description="Whether the current user may change a meal. A denial is a normal 200 response.",
    tags=['meals'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def toggle_permission(request):
    query = MealQuerySerializer(data=request.query_params)
    query.is_valid(raise_exception=True)

    try:
        permission = get_meal_toggle_permission(
            user=request.user,
            day=query.validated_data['date'],
            meal_type=query.validated_data['meal_type'],
        )
    except (MealsServiceError, CalendarServiceError) as e:
        return _error_response(e)

    return Response(TogglePermissionSerializer(permission.as_dict()).data)


@extend_schema(
    parameters=[
        OpenApiParameter('year', OpenApiTypes.INT, required=True),
        OpenApiParameter('month', OpenApiTypes.INT, required=True),
        USER_PARAM,
    ],
    responses={200: MealSummarySerializer, 403: ErrorResponseSerializer},
    description="ON days and meal counts over a month window.",
    tags=['meals'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def meal_summary(request):
    query = MonthQuerySerializer(data=request.query_params)
    query.is_valid(raise_exception=True)

    try:
        summary = get_meal_summary(
            viewer=request.user,
            year=query.validated_data['year'],
            month=query.validated_data['month'],
            user_id=query.validated_data.get('user_id'),
        )
    except (MealsServiceError, CalendarServiceError) as e:
        return _error_response(e)

    return Response(MealSummarySerializer(summary).data)


@extend_schema(
    parameters=[
        DATE_PARAM,
        OpenApiParameter('meal_type', OpenApiTypes.STR, enum=['lunch', 'dinner'], default='lunch'),
    ],
    responses={200: DailyMealsSerializer, 400: ErrorResponseSerializer, 403: ErrorResponseSerializer},
    description="Every active user's status for one meal on a date, with totals (manager or higher).",
    tags=['meals'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated, IsManagerRole])
def daily_meals(request):
    query = DailyMealQuerySerializer(data=request.query_params)
    query.is_valid(raise_exception=True)

    try:
        daily = get_daily_meals(
            viewer=request.user,
            day=query.validated_data['date'],
            meal_type=query.validated_data['meal_type'],
        )
    except (MealsServiceError, CalendarServiceError) as e:
        return _error_response(e)

    return Response(DailyMealsSerializer(daily).data)


# =============================================================================
# MEAL MUTATIONS
# =============================================================================

@extend_schema(
    request=MealToggleSerializer,
    responses={200: MealSerializer, 400: ErrorResponseSerializer, 403: ErrorResponseSerializer},
    description="Turn a meal ON or OFF. Omitting is_on flips the current status.",
    tags=['meals'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated])
def meal_toggle(request):
    serializer = MealToggleSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data

    try:
        meal = toggle_meal(
            actor=request.user,
            day=data['date'],
            meal_type=data['meal_type'],
            is_on=data.get('is_on'),
            user_id=data.get('user_id'),
            notes=data.get('notes'),
        )
    except (MealsServiceError, CalendarServiceError) as e:
        return _error_response(e)

    return Response(MealSerializer(meal).data)


@extend_schema(
    request=BulkToggleSerializer,
    responses={
        200: inline_serializer(
            name='BulkToggleResponse',
            fields={
                'updated': serializers.ListField(child=serializers.DictField()),
                'skipped': serializers.ListField(child=serializers.DictField()),
            },
        ),
        400: ErrorResponseSerializer,
        403: ErrorResponseSerializer,
    },
    description="Turn meals ON or OFF over a date window (max 31 days); denied days are skipped.",
    tags=['meals'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated])
def meal_bulk_toggle(request):
    serializer = BulkToggleSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data

    try:
        result = bulk_toggle_meals(
            actor=request.user,
            start_date=data['start_date'],
            end_date=data['end_date'],
            meal_type=data['meal_type'],
            is_on=data['is_on'],
            user_id=data.get('user_id'),
        )
    except (MealsServiceError, CalendarServiceError) as e:
        return _error_response(e)

    return Response(result)


@extend_schema(
    request=MealCountSerializer,
    responses={200: MealSerializer, 400: ErrorResponseSerializer, 403: ErrorResponseSerializer},
    description="Set a user's meal count for a date (manager or higher).",
    tags=['meals'],
)
@api_view(['PUT'])
@permission_classes([IsAuthenticated, IsManagerRole])
def meal_count(request):
    serializer = MealCountSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data

    try:
        meal = update_meal_count(
            actor=request.user,
            user_id=data['user_id'],
            day=data['date'],
            meal_type=data['meal_type'],
            count=data['count'],
        )
    except (MealsServiceError, CalendarServiceError) as e:
        return _error_response(e)

    return Response(MealSerializer(meal).data)


@extend_schema(
    request=ResetMealsSerializer,
    responses={
        200: inline_serializer(name='ResetMealsResponse', fields={'deleted': serializers.IntegerField()}),
        400: ErrorResponseSerializer,
        403: ErrorResponseSerializer,
    },
    description="Remove manual meal records so the system default applies (admin only).",
    tags=['meals'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated, IsAdminRole])
def meal_reset(request):
    serializer = ResetMealsSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data

    try:
        deleted = reset_to_default(
            actor=request.user,
            user_id=data['user_id'],
            start_date=data['start_date'],
            end_date=data['end_date'],
            meal_type=data.get('meal_type'),
        )
    except (MealsServiceError, CalendarServiceError) as e:
        return _error_response(e)

    return Response({'deleted': deleted})


# =============================================================================
# OVERRIDES
# =============================================================================

@extend_schema(
    methods=['GET'],
    parameters=[
        OpenApiParameter('meal_type', OpenApiTypes.STR, enum=['lunch', 'dinner', 'both']),
        OpenApiParameter('target_type', OpenApiTypes.STR, enum=['user', 'all_users', 'global']),
        OpenApiParameter('is_active', OpenApiTypes.BOOL),
        OpenApiParameter('start_date', OpenApiTypes.DATE),
        OpenApiParameter('end_date', OpenApiTypes.DATE),
    ],
    responses={200: RuleOverrideSerializer(many=True)},
    description="List overrides (manager or higher).",
    tags=['overrides'],
)
@extend_schema(
    methods=['POST'],
    request=OverrideCreateSerializer,
    responses={201: RuleOverrideSerializer, 400: ErrorResponseSerializer, 403: ErrorResponseSerializer},
    description="Create an override. Managers may target single users; global and all-user need an admin.",
    tags=['overrides'],
)
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsManagerRole])
def override_list(request):
    if request.method == 'GET':
        query = OverrideListQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        filters = query.validated_data

        try:
            overrides = list_overrides(
                actor=request.user,
                meal_type=filters.get('meal_type'),
                target_type=filters.get('target_type'),
                is_active=filters.get('is_active'),
                start=filters.get('start_date'),
                end=filters.get('end_date'),
            )
        except (MealsServiceError, CalendarServiceError) as e:
            return _error_response(e)

        return Response(RuleOverrideSerializer(overrides, many=True).data)

    serializer = OverrideCreateSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        override = create_override(actor=request.user, **serializer.validated_data)
    except (MealsServiceError, CalendarServiceError) as e:
        return _error_response(e)

    return Response(RuleOverrideSerializer(override).data, status=status.HTTP_201_CREATED)


@extend_schema(
    methods=['PATCH'],
    request=OverrideUpdateSerializer,
    responses={200: RuleOverrideSerializer, 400: ErrorResponseSerializer, 403: ErrorResponseSerializer, 404: ErrorResponseSerializer},
    description="Update an override's action, reasons, activity or expiry.",
    tags=['overrides'],
)
@extend_schema(
    methods=['DELETE'],
    responses={204: None, 403: ErrorResponseSerializer, 404: ErrorResponseSerializer},
    description="Delete an override.",
    tags=['overrides'],
)
@api_view(['PATCH', 'DELETE'])
@permission_classes([IsAuthenticated, IsManagerRole])
def override_detail(request, pk):
    try:
        if request.method == 'DELETE':
            delete_override(actor=request.user, override_id=pk)
            return Response(status=status.HTTP_204_NO_CONTENT)

        serializer = OverrideUpdateSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        override = update_override(actor=request.user, override_id=pk, **serializer.validated_data)
    except (MealsServiceError, CalendarServiceError) as e:
        return _error_response(e)

    return Response(RuleOverrideSerializer(override).data)


@extend_schema(
    request=None,
    responses={200: RuleOverrideSerializer, 403: ErrorResponseSerializer, 404: ErrorResponseSerializer},
    description="Flip an override between active and inactive.",
    tags=['overrides'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated, IsManagerRole])
def override_toggle(request, pk):
    try:
        override = toggle_override_active(actor=request.user, override_id=pk)
    except MealsServiceError as e:
        return _error_response(e)

    return Response(RuleOverrideSerializer(override).data)


@extend_schema(
    parameters=[DATE_PARAM, MEAL_TYPE_PARAM, USER_PARAM],
    responses={200: RuleOverrideSerializer(many=True), 400: ErrorResponseSerializer, 403: ErrorResponseSerializer},
    description="Overrides applying to a meal, strongest first.",
    tags=['overrides'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def override_check(request):
    query = MealQuerySerializer(data=request.query_params)
    query.is_valid(raise_exception=True)

    try:
        overrides = check_overrides(
            actor=request.user,
            day=query.validated_data['date'],
            meal_type=query.validated_data['meal_type'],
            user_id=query.validated_data.get('user_id'),
        )
    except (MealsServiceError, CalendarServiceError) as e:
        return _error_response(e)

    return Response(RuleOverrideSerializer(overrides, many=True).data)
