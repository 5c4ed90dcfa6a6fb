# -*- coding: utf-8 -*-
"""
    @author: 数模加油站
    @time  : 2026/10/12 11:20
    @file  : classes.py
"""
import math
import warnings
from abc import abstractmethod, ABC

import numpy as np
from scipy import stats
from scipy.integrate import quad
from scipy.optimize import brentq
from scipy.special import logsumexp

from .formatting import format_value, format_df, format_pvalue

_ALTERNATIVES = ("two-sided", "less", "greater")
_NCT_EXACT_LIMIT = 50


def _ci_label(conf_level: float, name: str = "CI") -> str:
    return f"\\mathrm{{{name}}}_{{{conf_level * 100:g}\\%}}"


def _interval_text(low, high, digits: int) -> str:
    return f"[{format_value(low, digits)}, {format_value(high, digits)}]"


def _chi_nodes(df: float, k: int = 256) -> np.ndarray:
    """S = sqrt(chi2_df / df) 的 k 个等概率分位点"""
    return np.sqrt(stats.chi2.ppf((np.arange(k) + 0.5) / k, df) / df)


def _nct_ci(t: float, df: float, conf_level: float, alternative: str):
    """
        反解非中心 t 分布，得到非中心参数的置信区间
    """
    if not np.isfinite(t):
        return np.nan, np.nan
    alpha = 1 - conf_level
    span = 10.0 + 5.0 * abs(t)
    if abs(t) <= _NCT_EXACT_LIMIT:
        cdf = lambda ncp: stats.nct.cdf(t, df, ncp)
    else:
        # |t| 很大时 scipy 的 nct 极慢，改用 P(T <= t) = E[Phi(t*S - ncp)]
        s = _chi_nodes(df, 1024)
        cdf = lambda ncp: float(np.mean(stats.norm.cdf(t * s - ncp)))

    def _solve(target):
        # cdf 关于 ncp 单调递减
        return brentq(lambda ncp: cdf(ncp) - target, t - span, t + span)

    if alternative == "two-sided":
        return _solve(1 - alpha / 2), _solve(alpha / 2)
    if alternative == "greater":
        return _solve(1 - alpha), np.inf
    return -np.inf, _solve(alpha)


def _t_bounds(center: float, se: float, df: float, conf_level: float, alternative: str):
    alpha = 1 - conf_level
    if alternative == "two-sided":
        q = stats.t.ppf(1 - alpha / 2, df)
        return center - q * se, center + q * se
    q = stats.t.ppf(1 - alpha, df)
    if alternative == "greater":
        return center - q * se, np.inf
    return -np.inf, center + q * se


def _t_pvalue(t: float, df: float, alternative: str) -> float:
    if alternative == "two-sided":
        return float(2 * stats.t.sf(abs(t), df))
    if alternative == "greater":
        return float(stats.t.sf(t, df))
    return float(stats.t.cdf(t, df))


def winsorize(x: np.ndarray, tr: float) -> np.ndarray:
    """两端各 floor(tr*n) 个值缩尾到相邻的保留值"""
    xs = np.sort(np.asarray(x, float))
    n = xs.size
    g = int(math.floor(tr * n))
    if g > 0:
        xs[:g] = xs[g]
        xs[n - g:] = xs[n - g - 1]
    return xs


def akp_constant(tr: float) -> float:
    """
        标准正态在 tr 缩尾下的标准差，AKP 稳健效应量用它做一致性校正（tr=0.2 时约 0.642）
    """
    if tr == 0:
        return 1.0
    z = stats.norm.ppf(1 - tr)
    var = (1 - 2 * tr) - 2 * z * stats.norm.pdf(z) + 2 * tr * z ** 2
    return math.sqrt(var)


class Base(ABC):
    """
        单样本检验基类
    """

    def __init__(self, x, test_value: float = 0, conf_level: float = 0.95,
                 digits: int = 2, alternative: str = "two-sided"):
        """
        Parameters
        ----------
        x: array-like
            样本，缺失值会被剔除
        test_value: float
            原假设下的位置参数
        conf_level: float
            置信水平，(0, 1)
        digits: int
            表达式中保留的小数位数
        alternative: str
            "two-sided"、"less" 或 "greater"
        """
        self.x = x
        self.test_value = test_value
        self.conf_level = conf_level
        self.digits = digits
        self.alternative = alternative
        self.__check_type__()

    def __check_type__(self):
        self.__check_x()
        self.__check_conf_level()
        self.__check_alternative()

    def __check_x(self):
        x = np.asarray(self.x, dtype=float).ravel()
        x = x[~np.isnan(x)]
        if x.size < 2:
            raise ValueError("at least 2 non-missing observations are required")
        self.x = x
        self.n = int(x.size)

    def __check_conf_level(self):
        if not 0 < self.conf_level < 1:
            raise ValueError("conf_level must be between 0 and 1")

    def __check_alternative(self):
        if self.alternative not in _ALTERNATIVES:
            raise ValueError(f"alternative must be one of {_ALTERNATIVES}")

    def _n_obs_text(self) -> str:
        return f"$n_{{\\mathrm{{obs}}}} = {self.n}$"

    def _row(self, **values) -> dict:
        row = {
            "statistic": np.nan, "df": np.nan, "p_value": np.nan,
            "method": None, "alternative": self.alternative,
            "effectsize": None, "estimate": np.nan,
            "conf_level": self.conf_level, "conf_low": np.nan, "conf_high": np.nan,
            "n_obs": self.n, "expression": None,
        }
        row.update(values)
        return row

    @abstractmethod
    def compute(self) -> dict:
        pass


class Parametric(Base):
    """
        Student 单样本 t 检验，效应量为 Hedges' g 或 Cohen's d
    """

    def __init__(self, x, test_value: float = 0, effsize_type: str = "g", **kwargs):
        self.effsize_type = effsize_type
        super().__init__(x, test_value, **kwargs)
        self.__check_effsize()

    def __check_effsize(self):
        token = str(self.effsize_type).lower()
        if token in ("g", "unbiased", "hedges"):
            self.hedges = True
        elif token in ("d", "biased", "cohen"):
            self.hedges = False
        else:
            raise ValueError("effsize_type must be 'g'/'unbiased' or 'd'/'biased'")

    def compute(self):
        n, df = self.n, self.n - 1
        res = stats.ttest_1samp(self.x, self.test_value, alternative=self.alternative)
        t, p = float(res.statistic), float(res.pvalue)
        sd = float(np.std(self.x, ddof=1))
        d = (float(np.mean(self.x)) - self.test_value) / sd if sd > 0 else np.nan

        lo, hi = _nct_ci(t, df, self.conf_level, self.alternative)
        lo, hi = lo / math.sqrt(n), hi / math.sqrt(n)
        # 小样本校正 J
        J = 1 - 3 / (4 * df - 1) if self.hedges else 1.0
        es, lo, hi = d * J, lo * J, hi * J
        es_name = "Hedges' g" if self.hedges else "Cohen's d"
        es_sym = "\\widehat{g}_{\\mathrm{Hedges}}" if self.hedges else "\\widehat{d}_{\\mathrm{Cohen}}"

        dg = self.digits
        expression = ", ".join([
            f"$t_{{\\mathrm{{Student}}}}({format_df(df, dg)}) = {format_value(t, dg)}$",
            f"$p = {format_pvalue(p, dg)}$",
            f"${es_sym} = {format_value(es, dg)}$",
            f"${_ci_label(self.conf_level)}$ {_interval_text(lo, hi, dg)}",
            self._n_obs_text(),
        ])
        return self._row(
            statistic=t, df=df, p_value=p, method="One Sample t-test",
            effectsize=es_name, estimate=es, conf_low=lo, conf_high=hi,
            expression=expression,
        )


class NonParametric(Base):
    """
        Wilcoxon 符号秩检验，效应量为秩二列相关 r
    """

    def compute(self):
        d = self.x - self.test_value
        nonzero = d[d != 0]
        m = nonzero.size
        if m == 0:
            warnings.warn("all differences from test_value are zero; Wilcoxon test is undefined")
            v, p, r, lo, hi = 0.0, np.nan, np.nan, np.nan, np.nan
        else:
            ranks = stats.rankdata(np.abs(nonzero))
            r_plus = float(ranks[nonzero > 0].sum())
            r_minus = float(ranks[nonzero < 0].sum())
            v = r_plus
            p = float(stats.wilcoxon(nonzero, zero_method="wilcox",
                                     alternative=self.alternative).pvalue)
            r = (r_plus - r_minus) / (r_plus + r_minus)
            # Fisher z 变换下的标准误
            max_w = (m ** 2 + m) / 2
            se = math.sqrt((2 * m ** 3 + 3 * m ** 2 + m) / 6) / max_w
            lo, hi = self.__fisher_ci(r, se)

        dg = self.digits
        expression = ", ".join([
            f"$V_{{\\mathrm{{Wilcoxon}}}} = {format_df(v, dg)}$",
            f"$p = {format_pvalue(p, dg)}$",
            f"$\\widehat{{r}}_{{\\mathrm{{biserial}}}}^{{\\mathrm{{rank}}}} = {format_value(r, dg)}$",
            f"${_ci_label(self.conf_level)}$ {_interval_text(lo, hi, dg)}",
            self._n_obs_text(),
        ])
        return self._row(
            statistic=v, p_value=p, method="Wilcoxon signed rank test",
            effectsize="r (rank biserial)", estimate=r, conf_low=lo, conf_high=hi,
            expression=expression,
        )

    def __fisher_ci(self, r: float, se: float):
        alpha = 1 - self.conf_level
        with np.errstate(divide="ignore"):
            z = np.arctanh(r)
        if self.alternative == "two-sided":
            q = stats.norm.ppf(1 - alpha / 2)
            return float(np.tanh(z - q * se)), float(np.tanh(z + q * se))
        q = stats.norm.ppf(1 - alpha)
        if self.alternative == "greater":
            return float(np.tanh(z - q * se)), 1.0
        return -1.0, float(np.tanh(z + q * se))


class Robust(Base):
    """
        截尾均值 t 检验（Tukey-McLaughlin），效应量为 AKP 稳健 delta
    """

    def __init__(self, x, test_value: float = 0, tr: float = 0.2, **kwargs):
        self.tr = tr
        super().__init__(x, test_value, **kwargs)
        self.__check_tr()

    def __check_tr(self):
        if not 0 <= self.tr < 0.5:
            raise ValueError("tr must be in [0, 0.5)")
        g = int(math.floor(self.tr * self.n))
        self.df = self.n - 2 * g - 1
        if self.df < 1:
            raise ValueError("too few observations left after trimming")

    def compute(self):
        tm = float(stats.trim_mean(self.x, self.tr))
        sw = float(np.std(winsorize(self.x, self.tr), ddof=1))
        se = sw / ((1 - 2 * self.tr) * math.sqrt(self.n))
        with np.errstate(divide="ignore", invalid="ignore"):
            t = float(np.divide(tm - self.test_value, se))
            c = akp_constant(self.tr)
            ci_lo, ci_hi = _t_bounds(tm, se, self.df, self.conf_level, self.alternative)
            es = float(np.divide(c * (tm - self.test_value), sw))
            lo = float(np.divide(c * (ci_lo - self.test_value), sw))
            hi = float(np.divide(c * (ci_hi - self.test_value), sw))
        p = _t_pvalue(t, self.df, self.alternative) if np.isfinite(t) else np.nan

        dg = self.digits
        expression = ", ".join([
            f"$t_{{\\mathrm{{trimmed}}}}({format_df(self.df, dg)}) = {format_value(t, dg)}$",
            f"$p = {format_pvalue(p, dg)}$",
            f"$\\widehat{{\\delta}}_{{\\mathrm{{R}}}}^{{\\mathrm{{AKP}}}} = {format_value(es, dg)}$",
            f"${_ci_label(self.conf_level)}$ {_interval_text(lo, hi, dg)}",
            self._n_obs_text(),
        ])
        return self._row(
            statistic=t, df=self.df, p_value=p,
            method="One-sample trimmed mean t-test",
            effectsize="AKP robust delta", estimate=es, conf_low=lo, conf_high=hi,
            expression=expression,
        )


class Bayes(Base):
    """
        JZS Bayes 因子单样本 t 检验（Rouder et al., 2009），Cauchy 先验尺度为 bf_prior
    """

    def __init__(self, x, test_value: float = 0, bf_prior: float = 0.707, **kwargs):
        self.bf_prior = bf_prior
        super().__init__(x, test_value, **kwargs)
        if self.bf_prior <= 0:
            raise ValueError("bf_prior must be positive")

    def log_bf10(self, t: float) -> float:
        n, nu, r = self.n, self.n - 1, self.bf_prior

        def log_h(u):
            # 积分变量换成 u = log g
            g = np.exp(u)
            return (-0.5 * np.log1p(n * g)
                    - (nu + 1) / 2 * np.log1p(t ** 2 / ((1 + n * g) * nu))
                    + np.log(r) - 0.5 * np.log(2 * np.pi)
                    - 0.5 * u - r ** 2 / (2 * g))

        grid = np.linspace(-15, 15, 601)
        peak = grid[np.argmax(log_h(grid))]
        h_max = float(log_h(peak))
        value, err = quad(lambda u: np.exp(log_h(u) - h_max), peak - 25, peak + 25,
                          points=[peak], limit=200)
        if err > 1e-6 * max(value, 1.0):
            warnings.warn(f"Bayes factor integral may be inaccurate (abserr={err:.2g})")
        log_den = -(nu + 1) / 2 * np.log1p(t ** 2 / nu)
        return float(np.log(value) + h_max - log_den)

    def posterior(self, t: float):
        """
            标准化效应 delta 的后验：非中心 t 似然 × Cauchy 先验，网格上数值求解

            t = (Z + delta*sqrt(n)) / S，S = sqrt(chi2_nu / nu)，
            给定 S = s 时 t 的密度为 s * phi(t*s - delta*sqrt(n))，
            似然取 S 的分位点上的平均，只需正态密度
        Returns
        -------
        out: tuple
            后验中位数、等尾可信区间下限、上限
        """
        n, nu = self.n, self.n - 1
        root_n = math.sqrt(n)
        d = t / root_n
        se = math.sqrt(1 / n + d ** 2 / (2 * nu))
        grid = np.linspace(d - 12 * se, d + 12 * se, 2001)
        s = _chi_nodes(nu)
        z = t * s[None, :] - grid[:, None] * root_n
        log_lik = logsumexp(np.log(s)[None, :] - 0.5 * z ** 2, axis=1)
        log_post = log_lik + stats.cauchy.logpdf(grid, 0, self.bf_prior)
        dens = np.exp(log_post - np.max(log_post))
        cdf = np.concatenate([[0.0], np.cumsum((dens[1:] + dens[:-1]) / 2)])
        cdf /= cdf[-1]
        alpha = 1 - self.conf_level
        median, lo, hi = np.interp([0.5, alpha / 2, 1 - alpha / 2], cdf, grid)
        return float(median), float(lo), float(hi)

    def compute(self):
        res = stats.ttest_1samp(self.x, self.test_value)
        t = float(res.statistic)
        if not np.isfinite(t):
            raise ValueError("Bayes factor is undefined for a sample with zero variance")
        log_bf10 = self.log_bf10(t)
        est, lo, hi = self.posterior(t)

        dg = self.digits
        expression = ", ".join([
            f"$\\log_{{e}}(\\mathrm{{BF}}_{{01}}) = {format_value(-log_bf10, dg)}$",
            f"$\\widehat{{\\delta}}_{{\\mathrm{{std}}}}^{{\\mathrm{{posterior}}}} = {format_value(est, dg)}$",
            f"${_ci_label(self.conf_level, 'CrI')}^{{\\mathrm{{ETI}}}}$ {_interval_text(lo, hi, dg)}",
            f"$r_{{\\mathrm{{Cauchy}}}}^{{\\mathrm{{JZS}}}} = {format_value(self.bf_prior, dg)}$",
        ])
        row = self._row(
            statistic=t, df=self.n - 1, method="Bayesian one-sample t-test",
            alternative="two-sided", effectsize="Bayesian standardized difference",
            estimate=est, conf_low=lo, conf_high=hi, expression=expression,
        )
        row.update(bf10=float(np.exp(log_bf10)), log_e_bf10=log_bf10, prior_scale=self.bf_prior)
        return row
