from .base import BlockModel, CTAButton, Media, SectionBlock
from .hero import HeroCarousel, HeroSection, HeroSlide
from .specialties import MedicalSpecialtiesGrid, MedicalSpecialty
from .text import TextBlock
from .services import Service, ServicesGrid
from .testimonials import Testimonial, TestimonialsSection
from .news import Article, NewsSection
from .faq import FAQItem, FAQSection
from .contact_form import ContactFormSection
from .stats import StatItem, StatsSection
from .team import TeamMember, TeamSection
from .cta import CTASection

__all__ = [
    "BlockModel", "CTAButton", "Media", "SectionBlock",
    "HeroSection", "HeroCarousel", "HeroSlide",
    "MedicalSpecialtiesGrid", "MedicalSpecialty",
    "TextBlock",
    "ServicesGrid", "Service",
    "TestimonialsSection", "Testimonial",
    "NewsSection", "Article",
    "FAQSection", "FAQItem",
    "ContactFormSection",
    "StatsSection", "StatItem",
    "TeamSection", "TeamMember",
    "CTASection",
]
