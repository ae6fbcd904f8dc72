"""
Content Writer Workflow

    outline -> draft (sections concurrently) -> seo -> style -> render

The outline is built from the request alone. Each section is drafted by the
LLM; a section whose draft fails falls back to templated text, so one bad
call never loses the whole piece.

Shared store keys:
    content_request  ContentRequest (input)
    outline          ContentOutline
    content_sections list of ContentSection, as drafted
    seo_analysis     SEOAnalysis
    final_content    list of ContentSection after tone/audience adaptation
    final_output     rendered markdown
"""

import re
from enum import Enum
from typing import Awaitable, Callable, Dict, List, Tuple

from pydantic import BaseModel, Field

from pocketgraph.core.graph import AsyncFlow, AsyncParallelBatchNode, Node, SharedStore
from pocketgraph.core.logging import LogComponent, get_logger
from pocketgraph.tools.llm import call_llm_async

Generator = Callable[[str], Awaitable[str]]

###################################################################
# Models
###################################################################

class ContentType(str, Enum):
    ARTICLE = "article"
    BLOG = "blog"
    TUTORIAL = "tutorial"
    NEWS = "news"

class Tone(str, Enum):
    PROFESSIONAL = "professional"
    CASUAL = "casual"
    ACADEMIC = "academic"
    CONVERSATIONAL = "conversational"

class Length(str, Enum):
    SHORT = "short"
    MEDIUM = "medium"
    LONG = "long"

TARGET_WORDS = {Length.SHORT: 500, Length.MEDIUM: 1000, Length.LONG: 2000}

class ContentRequest(BaseModel):
    topic: str = ""
    type: ContentType = ContentType.ARTICLE
    target_audience: str = "general"
    tone: Tone = Tone.PROFESSIONAL
    length: Length = Length.MEDIUM
    keywords: List[str] = Field(default_factory=list)

class OutlineSection(BaseModel):
    heading: str
    key_points: List[str]
    estimated_words: int

class ContentOutline(BaseModel):
    title: str
    sections: List[OutlineSection] = Field(default_factory=list)
    total_estimated_words: int = 0

class ContentSection(BaseModel):
    heading: str
    content: str
    keywords: List[str] = Field(default_factory=list)

    @property
    def word_count(self) -> int:
        return len(self.content.split())

class SEOAnalysis(BaseModel):
    score: float
    readability_score: float
    keyword_density: Dict[str, int] = Field(default_factory=dict)
    suggestions: List[str] = Field(default_factory=list)

TONE_REWRITES = {
    Tone.CASUAL: [("In conclusion", "To wrap things up"), ("Furthermore", "Plus"), ("Additionally", "Also")],
    Tone.ACADEMIC: [("Welcome to", "This paper examines"), ("In conclusion", "In summary")],
    Tone.CONVERSATIONAL: [("Welcome to", "Hey there! Let's talk about"), ("In conclusion", "So there you have it")],
}
BEGINNER_REWRITES = [("complex", "detailed"), ("advanced", "in-depth")]

DRAFT_PROMPT = """Write the "{heading}" section of a {type} titled "{title}".
Audience: {audience}. Tone: {tone}. Aim for about {words} words.
Cover these points: {points}.
Work in these keywords where they fit naturally: {keywords}.
Return only the section body, without the heading."""

###################################################################
# Helpers
###################################################################

def build_outline(request: ContentRequest) -> ContentOutline:
    """Lay out sections for the request's content type and length."""
    target = TARGET_WORDS[request.length]
    if request.type == ContentType.TUTORIAL:
        plan = [
            ("Introduction", [f"What is {request.topic}", "Why it matters", "What you'll learn"], 20),
            ("Prerequisites", ["Required knowledge", "Tools needed", "Setup instructions"], 20),
            ("Step-by-Step Guide", ["Detailed instructions", "Code examples", "Best practices"], 30),
            ("Common Issues and Solutions", ["Troubleshooting tips", "Error handling", "Debugging advice"], 15),
            ("Conclusion", ["Summary", "Next steps", "Additional resources"], 15),
        ]
    else:
        plan = [
            ("Introduction", ["Hook the reader", "Present the topic", "Outline the article"], 20),
            ("Main Content", ["Key points", "Supporting evidence", "Examples"], 60),
            ("Conclusion", ["Summarize key points", "Call to action", "Final thoughts"], 20),
        ]
    return ContentOutline(
        title=f"{request.topic} - Complete Guide",
        sections=[
            OutlineSection(heading=h, key_points=p, estimated_words=target * percent // 100)
            for h, p, percent in plan
        ],
        total_estimated_words=target,
    )

def template_section(request: ContentRequest, section: OutlineSection) -> str:
    heading = section.heading.lower()
    if "introduction" in heading:
        return (
            f"Welcome to our comprehensive guide on {request.topic}. In this {request.type.value}, "
            f"we'll explore everything you need to know about this subject."
        )
    if "conclusion" in heading:
        return (
            f"In conclusion, {request.topic} is worth the effort. By following the practices "
            f"outlined in this guide, you'll be well-equipped to succeed."
        )
    return (
        f"This section covers {heading}: {', '.join(section.key_points).lower()}. "
        f"It aims to make the material practical for {request.target_audience}."
    )

def analyze_seo(sections: List[ContentSection], request: ContentRequest) -> SEOAnalysis:
    text = " ".join(s.content for s in sections).lower()
    density = {
        keyword: len(re.findall(re.escape(keyword.lower()), text)) for keyword in request.keywords
    }
    words = len(text.split())
    sentences = len([s for s in re.split(r"[.!?]+", text) if s.strip()]) or 1
    readability = round(max(0.0, min(100.0, 100 - 2 * (words / sentences))), 1)

    suggestions = []
    if readability < 70:
        suggestions.append("Consider using shorter sentences to improve readability")
    if any(count < 2 for count in density.values()):
        suggestions.append("Include target keywords more naturally throughout the content")
    if len(sections) < 3:
        suggestions.append("Add more sections to improve content structure")

    score = min(100.0, readability + (20 if not suggestions else 0))
    return SEOAnalysis(
        score=score, readability_score=readability, keyword_density=density, suggestions=suggestions
    )

def adapt_style(content: str, request: ContentRequest) -> str:
    rewrites = list(TONE_REWRITES.get(request.tone, []))
    if request.target_audience == "beginners":
        rewrites += BEGINNER_REWRITES
    for old, new in rewrites:
        content = content.replace(old, new)
    return content

def _request(shared: SharedStore) -> ContentRequest:
    return shared.get("content_request") or ContentRequest()

###################################################################
# Nodes
###################################################################

class AnalyzeRequirements(Node):
    def prep(self, shared: SharedStore) -> ContentRequest:
        return _request(shared)

    def exec(self, request: ContentRequest) -> ContentOutline:
        return build_outline(request)

    def post(self, shared: SharedStore, prep_res: ContentRequest, exec_res: ContentOutline) -> str:
        shared["outline"] = exec_res
        get_logger(LogComponent.WORKFLOW).info(
            f"📋 Created outline with {len(exec_res.sections)} sections"
        )
        return "default"

DraftJob = Tuple[ContentRequest, str, OutlineSection]

class DraftSections(AsyncParallelBatchNode):
    """Draft every outline section concurrently; templated text on failure."""

    generator: Generator = Field(default=call_llm_async, repr=False)

    async def prep_async(self, shared: SharedStore) -> List[DraftJob]:
        request, outline = _request(shared), shared["outline"]
        return [(request, outline.title, section) for section in outline.sections]

    async def exec_async(self, job: DraftJob) -> ContentSection:
        request, title, section = job
        text = await self.generator(DRAFT_PROMPT.format(
            heading=section.heading,
            type=request.type.value,
            title=title,
            audience=request.target_audience,
            tone=request.tone.value,
            words=section.estimated_words,
            points="; ".join(section.key_points),
            keywords=", ".join(request.keywords) or "none",
        ))
        return ContentSection(heading=section.heading, content=text.strip(), keywords=request.keywords)

    async def exec_fallback_async(self, job: DraftJob, exc: Exception) -> ContentSection:
        request, _, section = job
        get_logger(LogComponent.WORKFLOW).warning(
            f"Drafting '{section.heading}' failed, using template: {exc!r}"
        )
        return ContentSection(
            heading=section.heading,
            content=template_section(request, section),
            keywords=request.keywords,
        )

    async def post_async(
        self, shared: SharedStore, prep_res: List[DraftJob], exec_res: List[ContentSection]
    ) -> str:
        shared["content_sections"] = exec_res
        total = sum(section.word_count for section in exec_res)
        get_logger(LogComponent.WORKFLOW).info(
            f"✍️  Drafted {len(exec_res)} sections ({total} words total)"
        )
        return "default"

class OptimizeSEO(Node):
    def prep(self, shared: SharedStore) -> Tuple[List[ContentSection], ContentRequest]:
        return shared.get("content_sections", []), _request(shared)

    def exec(self, inputs: Tuple[List[ContentSection], ContentRequest]) -> SEOAnalysis:
        return analyze_seo(*inputs)

    def post(self, shared: SharedStore, prep_res, exec_res: SEOAnalysis) -> str:
        shared["seo_analysis"] = exec_res
        get_logger(LogComponent.WORKFLOW).info(f"🔍 SEO score {exec_res.score}/100")
        return "default"

class AdaptStyle(Node):
    def prep(self, shared: SharedStore) -> Tuple[List[ContentSection], ContentRequest]:
        return shared.get("content_sections", []), _request(shared)

    def exec(self, inputs: Tuple[List[ContentSection], ContentRequest]) -> List[ContentSection]:
        sections, request = inputs
        return [
            section.model_copy(update={"content": adapt_style(section.content, request)})
            for section in sections
        ]

    def post(self, shared: SharedStore, prep_res, exec_res: List[ContentSection]) -> str:
        shared["final_content"] = exec_res
        return "default"

class RenderOutput(Node):
    """Render the adapted sections and SEO notes as markdown."""

    def prep(self, shared: SharedStore):
        return (
            shared.get("final_content", []),
            shared["outline"],
            shared["seo_analysis"],
            _request(shared),
        )

    def exec(self, inputs) -> str:
        sections, outline, seo, request = inputs
        lines = [
            f"# {outline.title}",
            "",
            f"**Content Type:** {request.type.value}",
            f"**Target Audience:** {request.target_audience}",
            f"**Tone:** {request.tone.value}",
            f"**SEO Score:** {seo.score}/100",
            "",
        ]
        for section in sections:
            lines += [f"## {section.heading}", "", section.content, ""]
        lines += [
            "---",
            "",
            f"**Word Count:** {sum(s.word_count for s in sections)}",
            f"**Readability Score:** {seo.readability_score}/100",
        ]
        if seo.suggestions:
            lines += ["", "**SEO Suggestions:**"] + [f"- {s}" for s in seo.suggestions]
        return "\n".join(lines) + "\n"

    def post(self, shared: SharedStore, prep_res, exec_res: str) -> None:
        shared["final_output"] = exec_res

###################################################################
# Flow
###################################################################

def create_writer_flow(generator: Generator = call_llm_async) -> AsyncFlow:
    outline = AnalyzeRequirements(id="outline")
    draft = DraftSections(id="draft", generator=generator, max_retries=2, wait=1)
    seo = OptimizeSEO(id="seo")
    style = AdaptStyle(id="style")
    render = RenderOutput(id="render")
    outline.then(draft).then(seo).then(style).then(render)
    return AsyncFlow(start=outline, id="writer")
