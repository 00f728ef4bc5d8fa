"""Authentication middleware handler.

Three schemes are modelled. JwtBearer accepts a request that is already
authenticated or that carries ``Authorization: Bearer <h>.<p>.<s>``. The
cookie based schemes (OpenIdConnect and Cookie) accept any cookie. Tokens
are never verified cryptographically.
"""

import re

from ..models.base import MiddlewareConfig
from ..models.enums import AuthScheme, MiddlewareKind, StepDecision
from ..models.simulation import MiddlewareSimulationResult, SimulationContext, SimulationStep
from .base import SecurityMiddlewareHandler, csharp_bool

BEARER_PATTERN = re.compile(r"^Bearer\s+(.+)$", re.IGNORECASE)
DEFAULT_LOGIN_PATH = "/Account/Login"

_AUTH_METHOD_LABELS = {
    AuthScheme.JWT_BEARER: "JWT Bearer",
    AuthScheme.OPEN_ID_CONNECT: "OpenID Connect",
    AuthScheme.COOKIE: "Cookie",
}


class AuthenticationHandler(SecurityMiddlewareHandler):
    kind = MiddlewareKind.AUTHENTICATION
    service_group = "authentication and authorization"

    def default_config(self) -> MiddlewareConfig:
        return {
            "authScheme": AuthScheme.JWT_BEARER.value,
            "jwtValidateIssuer": True,
            "jwtValidateAudience": True,
            "jwtValidateLifetime": True,
            "jwtRequireHttpsMetadata": True,
        }

    @staticmethod
    def scheme_of(config: MiddlewareConfig) -> str:
        return config.get("authScheme") or AuthScheme.JWT_BEARER.value

    def _check_jwt(self, context: SimulationContext) -> str | None:
        """Return a failure reason, or None when the bearer token is acceptable."""
        if context.is_authenticated:
            return None
        auth_header = context.header("Authorization")
        if not auth_header:
            return "No Bearer token provided in Authorization header"
        match = BEARER_PATTERN.match(auth_header)
        if match is None:
            return "Authorization header must use Bearer scheme"
        if len(match.group(1).split(".")) != 3:
            return "Invalid JWT format (expected header.payload.signature)"
        return None

    def _check_session(self, config: MiddlewareConfig, context: SimulationContext, scheme: str) -> str | None:
        if context.is_authenticated or context.has_cookie:
            return None
        if scheme == AuthScheme.OPEN_ID_CONNECT:
            return "No valid session. User would be redirected to identity provider."
        login_path = config.get("cookieLoginPath") or DEFAULT_LOGIN_PATH
        return f"No authentication cookie. User would be redirected to {login_path}"

    def simulate(
        self,
        config: MiddlewareConfig,
        context: SimulationContext,
        steps: list[SimulationStep],
    ) -> MiddlewareSimulationResult:
        scheme = self.scheme_of(config)
        auth_method = _AUTH_METHOD_LABELS.get(scheme, scheme)

        if scheme == AuthScheme.JWT_BEARER:
            failure_reason = self._check_jwt(context)
        else:
            failure_reason = self._check_session(config, context, scheme)
        www_authenticate = "Cookie" if scheme == AuthScheme.COOKIE else "Bearer"

        if failure_reason is not None:
            self.record(
                steps,
                f"Authentication failed ({auth_method}): {failure_reason}",
                StepDecision.TERMINATE,
                {"scheme": scheme, "authMethod": auth_method, "authenticated": False, "reason": failure_reason},
            )
            return self.unauthorized_result(
                f"Authentication required: {failure_reason}",
                www_authenticate=www_authenticate,
            )

        self.record(
            steps,
            f"Authentication successful ({auth_method})",
            StepDecision.CONTINUE,
            {"scheme": scheme, "authMethod": auth_method, "authenticated": True},
        )
        return self.continue_result()

    def generate_code(self, config: MiddlewareConfig, indent: str = "") -> str:
        return f"{indent}app.UseAuthentication();\n"

    def generate_service_registration(self, config: MiddlewareConfig) -> str:
        scheme = self.scheme_of(config)
        if scheme == AuthScheme.OPEN_ID_CONNECT:
            return self._oidc_registration(config)
        if scheme == AuthScheme.COOKIE:
            return self._cookie_registration(config)
        return self._jwt_registration(config)

    def _jwt_registration(self, config: MiddlewareConfig) -> str:
        lines = [
            "// JWT Bearer Authentication - for API authentication",
            "// Client sends JWT tokens in Authorization header, no user interaction",
            "builder.Services.AddAuthentication(JwtBearerDefaults.AuthenticationScheme)",
            "    .AddJwtBearer(options =>",
            "    {",
        ]
        if config.get("jwtAuthority"):
            lines.append(f'        options.Authority = "{config["jwtAuthority"]}";')
        if config.get("jwtAudience"):
            lines.append(f'        options.Audience = "{config["jwtAudience"]}";')
        lines.extend([
            f"        options.RequireHttpsMetadata = {csharp_bool(config.get('jwtRequireHttpsMetadata', True))};",
            "        options.TokenValidationParameters = new TokenValidationParameters",
            "        {",
            f"            ValidateIssuer = {csharp_bool(config.get('jwtValidateIssuer', True))},",
            f"            ValidateAudience = {csharp_bool(config.get('jwtValidateAudience', True))},",
            f"            ValidateLifetime = {csharp_bool(config.get('jwtValidateLifetime', True))},",
            "            ValidateIssuerSigningKey = true",
            "        };",
            "    });",
        ])
        return "\n".join(lines) + "\n"

    def _oidc_registration(self, config: MiddlewareConfig) -> str:
        lines = [
            "// OpenID Connect Authentication - for web applications with user interaction",
            "// Users are redirected to the identity provider for login/logout",
            "builder.Services.AddAuthentication(options =>",
            "{",
            "    options.DefaultScheme = CookieAuthenticationDefaults.AuthenticationScheme;",
            "    options.DefaultChallengeScheme = OpenIdConnectDefaults.AuthenticationScheme;",
            "})",
            ".AddCookie()",
            ".AddOpenIdConnect(options =>",
            "{",
        ]
        if config.get("oidcAuthority"):
            lines.append(f'    options.Authority = "{config["oidcAuthority"]}";')
        if config.get("oidcClientId"):
            lines.append(f'    options.ClientId = "{config["oidcClientId"]}";')
        if config.get("oidcClientSecret"):
            lines.append(f'    options.ClientSecret = "{config["oidcClientSecret"]}";')
        lines.extend([
            f'    options.ResponseType = "{config.get("oidcResponseType") or "code"}";',
            f"    options.SaveTokens = {csharp_bool(config.get('oidcSaveTokens', True))};",
            "    options.GetClaimsFromUserInfoEndpoint = "
            f"{csharp_bool(config.get('oidcGetClaimsFromUserInfoEndpoint', True))};",
        ])
        scopes = config.get("oidcScopes") or []
        if scopes:
            lines.extend(["", "    // Add scopes", "    options.Scope.Clear();"])
            lines.extend(f'    options.Scope.Add("{scope}");' for scope in scopes)
        lines.append("});")
        return "\n".join(lines) + "\n"

    def _cookie_registration(self, config: MiddlewareConfig) -> str:
        lines = [
            "// Cookie Authentication - for traditional web applications",
            "// Authentication state stored in browser cookie, typically with custom login page",
            "builder.Services.AddAuthentication(CookieAuthenticationDefaults.AuthenticationScheme)",
            "    .AddCookie(options =>",
            "    {",
        ]
        if config.get("cookieName"):
            lines.append(f'        options.Cookie.Name = "{config["cookieName"]}";')
        if config.get("cookieLoginPath"):
            lines.append(f'        options.LoginPath = "{config["cookieLoginPath"]}";')
        if config.get("cookieLogoutPath"):
            lines.append(f'        options.LogoutPath = "{config["cookieLogoutPath"]}";')
        if config.get("cookieAccessDeniedPath"):
            lines.append(f'        options.AccessDeniedPath = "{config["cookieAccessDeniedPath"]}";')
        if config.get("cookieExpireMinutes"):
            lines.append(f"        options.ExpireTimeSpan = TimeSpan.FromMinutes({config['cookieExpireMinutes']});")
        lines.extend([
            f"        options.SlidingExpiration = {csharp_bool(config.get('cookieSlidingExpiration', True))};",
            "    });",
        ])
        return "\n".join(lines) + "\n"

    def summarize(self, config: MiddlewareConfig) -> str:
        scheme = self.scheme_of(config)
        if scheme == AuthScheme.JWT_BEARER:
            return f"JWT Bearer: {config.get('jwtAuthority') or 'Configure authority'}"
        if scheme == AuthScheme.OPEN_ID_CONNECT:
            return f"OIDC: {config.get('oidcAuthority') or 'Configure authority'}"
        if scheme == AuthScheme.COOKIE:
            return f"Cookie: {config.get('cookieLoginPath') or DEFAULT_LOGIN_PATH}"
        return f"Scheme: {scheme}"
