"""Summary, transcription and filename prompt templates"""

from __future__ import annotations

from typing import Optional

FRONT_MATTER_INSTRUCTIONS = """---
- podcast: The name of the podcast
- episode: The episode number of the podcast
- title: The title of the podcast episode
- date: The date of the podcast episode in the format YYYY-MM-DD if available. If not, omit this field.
---"""


class SummaryPromptBuilder:
    """Builder for the prompts sent to the model"""

    DEFAULT_SUMMARY_PROMPT = (
        """Please analyze this podcast transcript and provide:

1. Key Discussion Points (3-5 main topics)
- Brief description of each point (2-3 sentences)
- Why this point matters in the broader context

2. Notable Insights
- Key quotes or memorable statements
- Practical takeaways or actionable items

3. Context & Relevance
- How this discussion connects to current trends/issues
- Who would find this information most valuable

4. Add a section to the top of the summary containing the following fields, like this:
"""
        + FRONT_MATTER_INSTRUCTIONS
        + """

5. Never add ``` markers to the beginning and end of the summary.

Format each point concisely but include enough detail to understand the core message and its significance.

Transcript:
{content}"""
    )

    DEFAULT_TRANSCRIPTION_PROMPT = (
        """Please transcribe the provided podcast audio.

Add a section to the top of the transcript containing the following fields, like this:
"""
        + FRONT_MATTER_INSTRUCTIONS
        + """

Do not add ``` markers to the beginning and end of the transcript.
{description}
Generate the transcript adhering strictly to the following format for every spoken line:
[HH:MM:SS] Speaker First Name: Dialogue text.

If it's a voiceover or narration, use "Voiceover" as the speaker label.

Ensure that:
1. An accurate timestamp ([HH:MM:SS]) indicates the start time of each line.
2. The speaker is identified at the beginning of the line (e.g., "Speaker 1", "Host", "Guest", "John", "Sally"). Please maintain consistency in speaker labels throughout the transcript.
3. The transcribed dialogue text follows the speaker identification.
"""
    )

    DESCRIPTION_CONTEXT = (
        "\nConsider this episode description while transcribing to help you find "
        "the hosts and participants names and context:\n{description}\n"
    )

    DEFAULT_FILENAME_PROMPT = """Based on this podcast content, generate a short filename-friendly title
(65 chars max, use only lowercase letters, numbers and hyphens, no spaces).
The filename should be descriptive of the podcast's main topic.
The filename should include the podcast name and episode number if available in the beginning.
The filename should end with .md for Markdown files.
Answer with the filename only.

Content:

{content}"""

    def __init__(
        self,
        summary_prompt: Optional[str] = None,
        transcription_prompt: Optional[str] = None,
        filename_prompt: Optional[str] = None,
    ):
        """Initialize prompt builder

        Args:
            summary_prompt: Custom summary template with a {content} placeholder
            transcription_prompt: Custom transcription template, {description} is optional
            filename_prompt: Custom filename template with a {content} placeholder
        """
        self.summary_prompt = summary_prompt or self.DEFAULT_SUMMARY_PROMPT
        self.transcription_prompt = transcription_prompt or self.DEFAULT_TRANSCRIPTION_PROMPT
        self.filename_prompt = filename_prompt or self.DEFAULT_FILENAME_PROMPT

    def build_summary(self, content: str) -> str:
        return self.summary_prompt.format(content=content)

    def build_transcription(self, description: Optional[str] = None) -> str:
        context = self.DESCRIPTION_CONTEXT.format(description=description) if description else ""
        return self.transcription_prompt.format(description=context)

    def build_filename(self, content: str) -> str:
        return self.filename_prompt.format(content=content)
