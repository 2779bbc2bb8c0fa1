# Django Core Imports
from django.contrib import messages
from django.contrib.auth.decorators import login_required
from django.http import JsonResponse
from django.shortcuts import redirect, render
from django.views.decorators.http import require_POST

# App-specific Imports
from skillfolio.errors import SkillfolioError

from . import services
from .forms import PortfolioForm

FEATURES = [
    {
        'title': "Easy Upload",
        'description': "Drag and drop your portfolio files in PDF or DOC format",
        'icon': "📄",
    },
    {
        'title': "Get Discovered",
        'description': "Showcase your work to potential clients and employers",
        'icon': "🔍",
    },
    {
        'title': "Connect",
        'description': "Network with professionals and grow your career",
        'icon': "🤝",
    },
]

# Static sample data; there is no analytics backend.
SKILL_PROGRESS = [
    {'name': 'React Development', 'progress': 85},
    {'name': 'UI/UX Design', 'progress': 75},
    {'name': 'Mobile Development', 'progress': 70},
]

SAMPLE_PROFILE = {
    'name': 'John Doe',
    'profession': 'Senior UX Designer',
    'bio': 'Passionate about creating intuitive and beautiful user experiences. '
           'Over 5 years of experience in digital product design.',
    'location': 'San Francisco, CA',
    'email': 'john.doe@example.com',
    'skills': ['UI Design', 'User Research', 'Prototyping', 'Figma', 'Adobe XD'],
    'interests': ['Design Systems', 'Accessibility', 'Mobile UX'],
}


# --- Main Page Views ---

@login_required
def home(request):
    return render(request, 'portfolios/home.html', {'features': FEATURES})


@login_required
def portfolio_list(request):
    return render(request, 'portfolios/list.html', {'portfolios': services.list_portfolios()})


@login_required
def profile(request):
    return render(request, 'portfolios/profile.html', {'profile': SAMPLE_PROFILE})


@login_required
def analytics(request):
    return render(request, 'portfolios/analytics.html', {'skills': SKILL_PROGRESS})


# --- Upload & Delete ---

@login_required
def upload(request):
    if request.method == 'POST':
        form = PortfolioForm(request.POST, request.FILES)
        if form.is_valid():
            data = form.cleaned_data
            try:
                services.upload_portfolio(
                    request.user,
                    data['title'],
                    data['description'],
                    data['category'],
                    data['file'],
                )
            except SkillfolioError as e:
                messages.error(request, e.message)
            else:
                messages.success(request, "Portfolio uploaded successfully!")
                return redirect('portfolios:list')
        else:
            messages.error(request, "Please fill in all fields and upload a file")
    else:
        form = PortfolioForm()
    return render(request, 'portfolios/upload.html', {'form': form})


@login_required
@require_POST
def delete_portfolio(request, portfolio_id):
    try:
        services.delete_portfolio(portfolio_id, request.user)
    except SkillfolioError as e:
        messages.error(request, e.message)
    else:
        messages.success(request, "Portfolio deleted.")
    return redirect('portfolios:list')


# --- Views & Likes ---

@login_required
def open_portfolio(request, portfolio_id):
    """Count a view, then hand the browser the document itself."""
    try:
        portfolio = services.record_view(portfolio_id)
    except SkillfolioError as e:
        messages.error(request, e.message)
        return redirect('portfolios:list')
    return redirect(portfolio.file_url)


@login_required
def like_portfolio(request, portfolio_id):
    if request.method != 'POST':
        return JsonResponse({'success': False, 'error': 'Invalid request'}, status=400)
    try:
        liked, like_count = services.toggle_like(portfolio_id, request.user)
    except SkillfolioError as e:
        return JsonResponse({'success': False, 'error': e.message}, status=400)
    return JsonResponse({'success': True, 'liked': liked, 'like_count': like_count})
