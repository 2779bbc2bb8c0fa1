from django.contrib import messages
from django.contrib.auth.decorators import login_required
from django.shortcuts import redirect, render
from django.views.decorators.http import require_POST

from accounts.models import Connection
from challenges.services import upcoming_challenges
from portfolios.services import featured_portfolio
from skillfolio.errors import NotFoundError, SkillfolioError, ValidationError

from . import services
from .feed import build_feed
from .forms import CommunityForm, MessageForm


@login_required
def index(request):
    """Featured portfolio, upcoming challenges and all communities."""
    user = request.user
    connected_ids = set(
        Connection.objects.filter(user=user).values_list('connected_user_id', flat=True)
    )
    communities = [
        {
            'community': community,
            'is_member': any(member.pk == user.pk for member in community.members.all()),
            'member_count': len(community.members.all()),
            'can_delete': community.created_by_id == user.pk,
        }
        for community in services.list_communities()
    ]
    challenges = [
        {'challenge': challenge, 'joined': challenge.has_participant(user)}
        for challenge in upcoming_challenges()
    ]
    context = {
        'featured': featured_portfolio(),
        'challenges': challenges,
        'communities': communities,
        'connected_ids': connected_ids,
        'form': CommunityForm(),
    }
    return render(request, 'community/index.html', context)


@login_required
@require_POST
def create_community(request):
    form = CommunityForm(request.POST)
    if not form.is_valid():
        for errors in form.errors.values():
            messages.error(request, errors[0])
        return redirect('community:index')
    try:
        services.create_community(
            request.user,
            form.cleaned_data['name'],
            form.cleaned_data['description'],
            form.cleaned_data['topics'],
        )
    except SkillfolioError as e:
        messages.error(request, e.message)
    else:
        messages.success(request, "Community created successfully!")
    return redirect('community:index')


@login_required
@require_POST
def join_community(request, community_id):
    try:
        services.join_or_enter(community_id, request.user)
    except SkillfolioError as e:
        messages.error(request, e.message)
        return redirect('community:index')
    # Always navigate to the chat room
    return redirect('community:chat', community_id=community_id)


@login_required
@require_POST
def delete_community(request, community_id):
    try:
        services.delete_community(community_id, request.user)
    except SkillfolioError as e:
        messages.error(request, e.message)
    else:
        messages.success(request, "Community deleted successfully!")
    return redirect('community:index')


@login_required
def chat_view(request, community_id):
    """
    Server-rendered chat page. Live updates arrive over the websocket; a plain
    POST is accepted as a fallback way to send a message.
    """
    try:
        community = services.get_community(community_id)
    except NotFoundError as e:
        messages.error(request, e.message)
        return redirect('community:index')

    if request.method == 'POST':
        form = MessageForm(request.POST)
        text = form.data.get('text', '')
        try:
            services.post_message(community, request.user, text)
            services.publish_messages(community.pk)
        except ValidationError:
            # Blank input is ignored without a round trip to the store.
            pass
        except SkillfolioError as e:
            messages.error(request, e.message)
        return redirect('community:chat', community_id=community.pk)

    window = services.message_window(community.pk)
    context = {
        'community': community,
        'feed': build_feed(window),
        'roster': services.presence_snapshot(community.pk),
        'form': MessageForm(),
    }
    return render(request, 'community/chat.html', context)
