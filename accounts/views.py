import logging

from django.contrib import messages
from django.contrib.auth import get_user_model
from django.contrib.auth.decorators import login_required
from django.shortcuts import get_object_or_404, redirect, render
from django.views.decorators.http import require_POST

from skillfolio.errors import AuthError, ValidationError

from . import identity
from .forms import SignInForm, SignUpForm
from .models import Connection

logger = logging.getLogger(__name__)

User = get_user_model()


def auth_view(request):
    """Sign-in and sign-up share one page; ``mode`` picks the form."""
    if request.user.is_authenticated and request.method != 'POST':
        return redirect('portfolios:home')

    mode = request.POST.get('mode') or request.GET.get('mode') or 'signin'
    form_class = SignUpForm if mode == 'signup' else SignInForm

    if request.method == 'POST':
        form = form_class(request.POST)
        if form.is_valid():
            data = form.cleaned_data
            try:
                if mode == 'signup':
                    identity.sign_up(request, data['email'], data['password'], data['display_name'])
                else:
                    identity.sign_in(request, data['email'], data['password'])
            except AuthError as e:
                messages.error(request, e.message)
            else:
                return redirect('portfolios:home')
        else:
            messages.error(request, "Please fill in all fields.")
    else:
        form = form_class()

    return render(request, 'accounts/auth.html', {'form': form, 'mode': mode})


def logout_view(request):
    identity.sign_out(request)
    return redirect('accounts:auth')


def connect(user, other_user):
    """Send a pending connection request; asking twice is a no-op."""
    if user.pk == other_user.pk:
        raise ValidationError("You cannot connect with yourself.")
    connection, created = Connection.objects.get_or_create(user=user, connected_user=other_user)
    if created:
        logger.info("User %s requested a connection with %s", user.pk, other_user.pk)
    return connection, created


@login_required
@require_POST
def connect_view(request, user_id):
    other_user = get_object_or_404(User, id=user_id)
    try:
        _, created = connect(request.user, other_user)
    except ValidationError as e:
        messages.error(request, e.message)
    else:
        if created:
            messages.success(request, f"Connection request sent to {other_user.public_name}.")
        else:
            messages.info(request, "You already sent a connection request.")
    return redirect('community:index')
