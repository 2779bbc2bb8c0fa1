from django.contrib import messages
from django.shortcuts import redirect, render

from skillfolio.errors import NotFoundError, SkillfolioError

from . import services
from .forms import SubmissionForm


def submit_view(request, challenge_id):
    """
    Challenge details and the submission form. Anyone may look; submitting
    needs a signed-in user.
    """
    try:
        challenge = services.get_challenge(challenge_id)
    except NotFoundError as e:
        messages.error(request, e.message)
        return redirect('community:index')

    if request.method == 'POST':
        if not request.user.is_authenticated:
            messages.error(request, "Please sign in to join challenges")
            return redirect('accounts:auth')

        form = SubmissionForm(request.POST, request.FILES)
        if form.is_valid():
            try:
                services.submit(challenge.pk, request.user, form.cleaned_data['file'])
            except SkillfolioError as e:
                messages.error(request, e.message)
            else:
                messages.success(request, "Challenge submitted successfully!")
                return redirect('community:index')
        else:
            for errors in form.errors.values():
                messages.error(request, errors[0])
    else:
        form = SubmissionForm()

    context = {
        'challenge': challenge,
        'rules': challenge.effective_rules(),
        'form': form,
        'already_submitted': request.user.is_authenticated and challenge.has_submitted(request.user),
    }
    return render(request, 'challenges/submit.html', context)
