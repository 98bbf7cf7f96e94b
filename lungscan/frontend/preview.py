import base64
import uuid

from lungscan.errors import PreviewReleasedError


class PreviewHandle:
    """Locally resolvable reference to the selected file's bytes.

    The page renders ``url`` directly, so no round trip to the service is
    needed. A handle holds a copy of the image until ``release()`` is
    called; after that the URL is gone.
    """

    def __init__(self, content, mime_type):
        self.id = uuid.uuid4().hex
        self.mime_type = mime_type
        self._content = content
        self._url = None

    @classmethod
    def acquire(cls, selected_file):
        return cls(selected_file.content, selected_file.mime_type)

    @property
    def released(self):
        return self._content is None

    @property
    def content(self):
        if self._content is None:
            raise PreviewReleasedError(f"preview {self.id} was released")
        return self._content

    @property
    def url(self):
        if self._content is None:
            raise PreviewReleasedError(f"preview {self.id} was released")
        if self._url is None:
            payload = base64.b64encode(self._content).decode('utf-8')
            self._url = f"data:{self.mime_type};base64,{payload}"
        return self._url

    def release(self):
        self._content = None
        self._url = None

    def __repr__(self):
        state = "released" if self.released else "live"
        return f"<PreviewHandle {self.id} {self.mime_type} {state}>"
