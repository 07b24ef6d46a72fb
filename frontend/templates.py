"""
Quick-start job templates offered by the create-job form.

Picking one pre-fills title, description, category and budget range; the
business owner still edits every field and supplies the deadline.
"""
from dataclasses import dataclass


@dataclass(frozen=True)
class JobTemplate:
    title: str
    description: str
    category: str
    budget_min: int
    budget_max: int

    def as_fields(self) -> dict:
        return {
            "title": self.title,
            "description": self.description,
            "category": self.category,
            "budget_min": self.budget_min,
            "budget_max": self.budget_max,
        }


CATEGORIES: tuple[tuple[str, str], ...] = (
    ("ads", "Advertising & Marketing"),
    ("website", "Website Development"),
    ("automation", "Business Automation"),
    ("branding", "Branding & Design"),
)

JOB_TEMPLATES: dict[str, tuple[JobTemplate, ...]] = {
    "ads": (
        JobTemplate(
            title="Facebook Ads Campaign Setup",
            description=(
                "I need help setting up and managing a Facebook Ads campaign to generate leads "
                "for my business. Looking for someone to:\n\n"
                "- Create ad copy and select images\n"
                "- Set up targeting based on my ideal customer\n"
                "- Monitor performance and optimize for best results\n"
                "- Provide weekly reports on ad spend and conversions\n\n"
                "Budget: Flexible based on experience"
            ),
            category="ads",
            budget_min=500,
            budget_max=2000,
        ),
        JobTemplate(
            title="Google Ads for Local Business",
            description=(
                "Need an experienced Google Ads specialist to help my local service business get "
                "more customers through search ads.\n\n"
                "- Keyword research for local searches\n"
                "- Ad creation and landing page recommendations\n"
                "- Bid management and budget optimization\n"
                "- Monthly performance review\n\n"
                "Prefer someone with experience in [your industry]."
            ),
            category="ads",
            budget_min=800,
            budget_max=2500,
        ),
    ),
    "website": (
        JobTemplate(
            title="Simple Business Website",
            description=(
                "Looking for a web developer to build a professional website for my small "
                "business. Requirements:\n\n"
                "- 5-7 pages (Home, About, Services, Contact, etc.)\n"
                "- Mobile-responsive design\n"
                "- Contact form integration\n"
                "- SEO-friendly structure\n"
                "- Easy to update (WordPress or similar)\n\n"
                "Please include examples of similar work."
            ),
            category="website",
            budget_min=1000,
            budget_max=3000,
        ),
        JobTemplate(
            title="E-commerce Store Setup",
            description=(
                "Need help setting up an online store to sell my products. Looking for:\n\n"
                "- Platform recommendation (Shopify, WooCommerce, etc.)\n"
                "- Store design and branding\n"
                "- Product upload and organization\n"
                "- Payment gateway integration\n"
                "- Basic training on managing orders\n\n"
                "I have about 50 products to start with."
            ),
            category="website",
            budget_min=1500,
            budget_max=4000,
        ),
    ),
    "automation": (
        JobTemplate(
            title="Email Follow-up Automation",
            description=(
                "I want to automate my email follow-up process for new leads. Need someone to:\n\n"
                "- Set up automated email sequences\n"
                "- Integrate with my CRM or email platform\n"
                "- Create email templates for different scenarios\n"
                "- Set up triggers based on customer actions\n"
                "- Provide documentation on how to manage\n\n"
                "Currently using [your email platform]."
            ),
            category="automation",
            budget_min=400,
            budget_max=1200,
        ),
        JobTemplate(
            title="Lead Collection & CRM Integration",
            description=(
                "Looking to streamline how I collect and manage leads from my website and social "
                "media. Goals:\n\n"
                "- Automate lead capture from multiple sources\n"
                "- Integration with CRM system\n"
                "- Automated lead scoring or tagging\n"
                "- Notification system for hot leads\n"
                "- Dashboard for tracking pipeline\n\n"
                "Tech-savvy candidates preferred."
            ),
            category="automation",
            budget_min=600,
            budget_max=2000,
        ),
    ),
    "branding": (
        JobTemplate(
            title="Logo & Brand Identity Design",
            description=(
                "Starting a new business and need a professional brand identity package including:\n\n"
                "- Logo design (multiple concepts)\n"
                "- Color palette selection\n"
                "- Typography guidelines\n"
                "- Business card design\n"
                "- Social media profile images\n\n"
                "Please share your portfolio. Looking for modern, clean designs."
            ),
            category="branding",
            budget_min=500,
            budget_max=1500,
        ),
        JobTemplate(
            title="Social Media Branding Package",
            description=(
                "Need help creating consistent branding across all my social media channels:\n\n"
                "- Profile and cover images for each platform\n"
                "- Post templates for Instagram, Facebook, LinkedIn\n"
                "- Story templates\n"
                "- Brand guidelines document\n"
                "- Source files for future edits\n\n"
                "Must match my existing logo and colors."
            ),
            category="branding",
            budget_min=300,
            budget_max=1000,
        ),
    ),
}


def templates_for(category: str | None) -> tuple[JobTemplate, ...]:
    return JOB_TEMPLATES.get((category or "").strip().lower(), ())


def find_category(choice: str | None) -> str | None:
    """Accepts a 1-based menu number or a category value."""
    choice = (choice or "").strip().lower()
    if choice.isdigit():
        index = int(choice) - 1
        return CATEGORIES[index][0] if 0 <= index < len(CATEGORIES) else None
    return choice if choice in JOB_TEMPLATES else None
