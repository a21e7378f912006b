import logging
from django.conf import settings
from django.utils.decorators import method_decorator
from django.views.decorators.cache import never_cache
from rest_framework import status
from rest_framework.parsers import FormParser, MultiPartParser
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView
from core.exceptions import InvalidRequest, NotFound
from home.models import Note
from home.serializers import NoteSerializer
from home.storage import delete_stored, store_upload
from user.authentication import FirebaseAuthentication
from .models import UserProfile
from .serializers import (
    AvatarUploadSerializer, ProfileUpdateSerializer, ProfileWithCountsSerializer,
    UserProfileSerializer, UserSearchSerializer,
)
from .social import follow, follow_status, get_or_create_profile, get_profile, unfollow

logger = logging.getLogger(__name__)


def _notes_of(uid):
    notes = Note.objects.filter(uploader_uid=uid).order_by('-created_at', '-id').prefetch_related('reactions')
    return NoteSerializer(notes, many=True).data


@method_decorator(never_cache, name="dispatch")
class MyProfileView(APIView):
    authentication_classes = [FirebaseAuthentication]
    permission_classes = [IsAuthenticated]

    def get(self, request):
        profile = get_or_create_profile(request.user)
        return Response(ProfileWithCountsSerializer(profile).data, status=status.HTTP_200_OK)

    def patch(self, request):
        profile = get_or_create_profile(request.user)

        serializer = ProfileUpdateSerializer(profile, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()

        logger.info(f"Profile updated for {request.user.uid}: {sorted(serializer.validated_data)}")
        return Response(UserProfileSerializer(profile).data, status=status.HTTP_200_OK)


@method_decorator(never_cache, name="dispatch")
class MyAvatarView(APIView):
    parser_classes = (MultiPartParser, FormParser)
    authentication_classes = [FirebaseAuthentication]
    permission_classes = [IsAuthenticated]

    def post(self, request):
        if not request.FILES.get("avatar"):
            raise InvalidRequest("No file provided")

        serializer = AvatarUploadSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        profile = get_or_create_profile(request.user)
        old_url = profile.profile_pic_url

        stored = store_upload(serializer.validated_data["avatar"], folder="uploads/avatars")
        profile.profile_pic_url = stored.url
        profile.save(update_fields=["profile_pic_url", "updated_at"])

        if old_url != settings.DEFAULT_PROFILE_PIC:
            delete_stored(old_url)

        return Response(UserProfileSerializer(profile).data, status=status.HTTP_200_OK)

    def delete(self, request):
        profile = UserProfile.objects.filter(firebase_uid=request.user.uid).first()
        if not profile:
            raise NotFound("User not found")

        old_url = profile.profile_pic_url
        profile.profile_pic_url = settings.DEFAULT_PROFILE_PIC
        profile.save(update_fields=["profile_pic_url", "updated_at"])
        if old_url != settings.DEFAULT_PROFILE_PIC:
            delete_stored(old_url)

        return Response({
            "message": "Profile picture deleted",
            "profilePicUrl": profile.profile_pic_url,
        }, status=status.HTTP_200_OK)


@method_decorator(never_cache, name="dispatch")
class MyNotesView(APIView):
    authentication_classes = [FirebaseAuthentication]
    permission_classes = [IsAuthenticated]

    def get(self, request):
        return Response(_notes_of(request.user.uid), status=status.HTTP_200_OK)


class UserSearchView(APIView):
    authentication_classes = []
    permission_classes = [AllowAny]

    def get(self, request):
        query = (request.query_params.get("query") or "").strip()
        if not query:
            raise InvalidRequest("Query parameter required")

        users = UserProfile.objects.filter(username__icontains=query).order_by('username')[:10]
        return Response(UserSearchSerializer(users, many=True).data, status=status.HTTP_200_OK)


@method_decorator(never_cache, name="dispatch")
class UserDetailView(APIView):
    authentication_classes = [FirebaseAuthentication]

    def get_permissions(self):
        # ?status=true answers for the caller, so it needs a caller
        if self.request.query_params.get("status") == "true":
            return [IsAuthenticated()]
        return [AllowAny()]

    def get(self, request, uid):
        if request.query_params.get("status") == "true":
            return Response({"isFollowing": follow_status(request.user.uid, uid)}, status=status.HTTP_200_OK)

        profile = get_profile(uid)
        return Response(ProfileWithCountsSerializer(profile).data, status=status.HTTP_200_OK)


class UserNotesView(APIView):
    authentication_classes = []
    permission_classes = [AllowAny]

    def get(self, request, uid):
        return Response(_notes_of(uid), status=status.HTTP_200_OK)


@method_decorator(never_cache, name="dispatch")
class FollowView(APIView):
    authentication_classes = [FirebaseAuthentication]
    permission_classes = [IsAuthenticated]

    def post(self, request, uid):
        follow(request.user, uid)
        return Response({"message": "Followed successfully"}, status=status.HTTP_200_OK)

    def delete(self, request, uid):
        unfollow(request.user, uid)
        return Response({"message": "Unfollowed successfully"}, status=status.HTTP_200_OK)


@method_decorator(never_cache, name="dispatch")
class FollowStatusView(APIView):
    authentication_classes = [FirebaseAuthentication]
    permission_classes = [IsAuthenticated]

    def get(self, request, uid):
        return Response({"isFollowing": follow_status(request.user.uid, uid)}, status=status.HTTP_200_OK)


class FollowersView(APIView):
    authentication_classes = []
    permission_classes = [AllowAny]

    def get(self, request, uid):
        profile = get_profile(uid)
        followers = profile.followers.order_by('username')
        return Response(UserSearchSerializer(followers, many=True).data, status=status.HTTP_200_OK)


class FollowingView(APIView):
    authentication_classes = []
    permission_classes = [AllowAny]

    def get(self, request, uid):
        profile = get_profile(uid)
        following = profile.following.order_by('username')
        return Response(UserSearchSerializer(following, many=True).data, status=status.HTTP_200_OK)
